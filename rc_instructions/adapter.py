r"""Single entry point for parsing instructions in either grammar.

:func:`parse_instructions` detects whether a phrase uses legacy
``[[TT]]``/``[[SS]]``/``[[LL]]`` tokens or Markdown, dispatches to the
matching parser and guarantees a well-formed model: bad input and parser
failures are logged and replaced by the canonical empty model.

Example
-------
>>> from rc_instructions.adapter import detect_format, parse_instructions
>>> detect_format("# Title\n1. a").value
'markdown'
>>> model = parse_instructions("[[SS1]] Hold the card")
>>> model.sections[0].steps[0].text
'Hold the card'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import time
import typing as typ

from ._constants import (
    LEGACY_TOKEN_PATTERN,
    MARKDOWN_HEADING_PATTERN,
    MARKDOWN_LIST_PATTERN,
    MARKDOWN_PHRASE_SUFFIX,
)
from .errors import InvalidInputError
from .legacy_parser import parse_legacy
from .markdown_parser import parse_markdown
from .models import InstructionFormat, InstructionModel, empty_model
from .validator import validate_model

logger = logging.getLogger(__name__)

FormatChoice = InstructionFormat | str


def detect_format(text: object) -> InstructionFormat:
    """Guess the grammar ``text`` is written in.

    Any legacy token wins; otherwise a Markdown heading or list line selects
    Markdown. Everything else, including non-string input, is treated as
    legacy text.
    """
    if not isinstance(text, str):
        return InstructionFormat.LEGACY
    if LEGACY_TOKEN_PATTERN.search(text):
        return InstructionFormat.LEGACY
    if MARKDOWN_HEADING_PATTERN.search(text) or MARKDOWN_LIST_PATTERN.search(text):
        return InstructionFormat.MARKDOWN
    return InstructionFormat.LEGACY


def _coerce_format(value: FormatChoice) -> InstructionFormat:
    try:
        return InstructionFormat(value)
    except ValueError:
        logger.warning("unknown instruction format %r; auto-detecting", value)
        return InstructionFormat.AUTO


def parse_instructions(
    text: object,
    *,
    format: FormatChoice = InstructionFormat.AUTO,  # noqa: A002 - public option name
    asset_map: typ.Mapping[str, str] | None = None,
    spaces_per_level: int = 2,
    strict_mode: bool = False,
    validate: bool = False,
) -> InstructionModel:
    """Parse instruction text with the appropriate grammar.

    Parameters
    ----------
    text : object
        Phrase text. Non-string input is logged and yields the empty model
        unless ``strict_mode`` is set.
    format : InstructionFormat or str, optional
        ``"legacy"``, ``"markdown"`` or ``"auto"`` (default).
    asset_map : Mapping[str, str], optional
        Link map used to resolve legacy ``[[LLn]]`` tokens.
    spaces_per_level : int, optional
        Markdown indentation width per nesting level. Defaults to ``2``.
    strict_mode : bool, optional
        Raise :class:`InvalidInputError` for non-string input instead of
        recovering. Parser failures are always recovered.
    validate : bool, optional
        Run :func:`validate_model` on the result and log any problems.

    Returns
    -------
    InstructionModel
        The parsed model, or the canonical empty model on failure.

    Raises
    ------
    InvalidInputError
        If ``text`` is not a string and ``strict_mode`` is set.
    """
    if not isinstance(text, str):
        msg = f"instruction text must be a string, got {type(text).__name__}"
        if strict_mode:
            raise InvalidInputError(msg)
        logger.error("parse_instructions: %s", msg)
        return empty_model()

    requested = _coerce_format(format)
    actual = detect_format(text) if requested is InstructionFormat.AUTO else requested
    logger.debug("parsing instructions as %s", actual.value)

    try:
        if actual is InstructionFormat.MARKDOWN:
            model = parse_markdown(
                text, spaces_per_level=spaces_per_level, strict_mode=strict_mode
            )
        else:
            model = parse_legacy(text, asset_map or {})
    except Exception:  # noqa: BLE001
        logger.exception("parse_instructions: parsing failed (%s format)", actual.value)
        return empty_model()

    if validate:
        result = validate_model(model)
        if not result.valid:
            logger.warning(
                "parse_instructions: model validation failed: %s", result.errors
            )
    return model


def is_markdown_phrase(phrase_key: object) -> bool:
    """Return ``True`` when ``phrase_key`` follows the ``*_MD`` convention."""
    return isinstance(phrase_key, str) and phrase_key.endswith(MARKDOWN_PHRASE_SUFFIX)


def get_instruction_model(
    phrases: typ.Mapping[str, typ.Mapping[str, str]],
    phrase_key: str,
    language: str,
    *,
    format: FormatChoice | None = None,  # noqa: A002 - public option name
    fallback_language: str = "en",
    **options: typ.Any,
) -> InstructionModel:
    """Look up a phrase and parse it.

    Parameters
    ----------
    phrases : Mapping[str, Mapping[str, str]]
        Phrase table keyed by phrase key, then language code.
    phrase_key : str
        Key to look up. Keys ending in ``_MD`` are parsed as Markdown unless
        ``format`` is given.
    language : str
        Preferred language.
    format : InstructionFormat or str, optional
        Explicit grammar, overriding the key convention.
    fallback_language : str, optional
        Language used when ``language`` has no text. Defaults to ``"en"``.
    **options
        Remaining keyword arguments for :func:`parse_instructions`.

    Returns
    -------
    InstructionModel
        The parsed phrase, or the empty model when the phrase or its text is
        missing.
    """
    phrase = phrases.get(phrase_key)
    if not phrase:
        logger.error("get_instruction_model: phrase not found: %s", phrase_key)
        return empty_model()

    text = phrase.get(language) or phrase.get(fallback_language) or ""
    if not text:
        logger.error(
            "get_instruction_model: no text for language %r in %s", language, phrase_key
        )
        return empty_model()

    if format is None:
        format = (  # noqa: A001 - mirrors the parse_instructions option
            InstructionFormat.MARKDOWN
            if is_markdown_phrase(phrase_key)
            else InstructionFormat.AUTO
        )
    return parse_instructions(text, format=format, **options)


@dc.dataclass(slots=True)
class ParserMetrics:
    """Timing and size figures for one parse.

    Attributes
    ----------
    parse_time_ms : float
        Wall-clock parse time in milliseconds.
    total_sections : int
        Number of sections produced.
    total_steps : int
        Number of flat steps produced.
    steps_with_media : int
        Steps carrying at least one media URL.
    avg_time_per_step : float
        ``parse_time_ms / total_steps``, or ``0.0`` without steps.
    model : InstructionModel
        The parsed model itself.
    """

    parse_time_ms: float
    total_sections: int
    total_steps: int
    steps_with_media: int
    avg_time_per_step: float
    model: InstructionModel


@dc.dataclass(slots=True)
class ParserComparison:
    """Side-by-side metrics for equivalent legacy and Markdown phrases."""

    legacy: ParserMetrics
    markdown: ParserMetrics
    step_count_match: bool
    section_count_match: bool
    performance_delta: float
    faster_parser: str


def measure_parser_performance(text: object, **options: typ.Any) -> ParserMetrics:
    """Parse ``text`` with :func:`parse_instructions` and time it."""
    start = time.perf_counter()
    model = parse_instructions(text, **options)
    elapsed_ms = (time.perf_counter() - start) * 1000

    total_steps = len(model.flat_steps)
    steps_with_media = sum(
        1 for section in model.sections for step in section.steps if step.media_urls
    )
    return ParserMetrics(
        parse_time_ms=round(elapsed_ms, 3),
        total_sections=len(model.sections),
        total_steps=total_steps,
        steps_with_media=steps_with_media,
        avg_time_per_step=round(elapsed_ms / total_steps, 3) if total_steps else 0.0,
        model=model,
    )


def compare_parser_outputs(
    legacy_text: str,
    markdown_text: str,
    asset_map: typ.Mapping[str, str] | None = None,
) -> ParserComparison:
    """Parse equivalent legacy and Markdown phrases and compare the results."""
    legacy = measure_parser_performance(
        legacy_text, format=InstructionFormat.LEGACY, asset_map=asset_map
    )
    markdown = measure_parser_performance(
        markdown_text, format=InstructionFormat.MARKDOWN
    )
    return ParserComparison(
        legacy=legacy,
        markdown=markdown,
        step_count_match=legacy.total_steps == markdown.total_steps,
        section_count_match=legacy.total_sections == markdown.total_sections,
        performance_delta=round(markdown.parse_time_ms - legacy.parse_time_ms, 3),
        faster_parser=(
            "markdown" if markdown.parse_time_ms < legacy.parse_time_ms else "legacy"
        ),
    )


__all__ = [
    "ParserComparison",
    "ParserMetrics",
    "compare_parser_outputs",
    "detect_format",
    "get_instruction_model",
    "is_markdown_phrase",
    "measure_parser_performance",
    "parse_instructions",
]
