r"""Parse the bracket-token instruction grammar.

Legacy phrases mark structure with double-bracket tokens on their own lines:

``[[TTn]] title``
    Starts a section. Without inline text the next plain line is the title.
``[[SSn]] text``
    A step; dotted numbers (``2.1``) nest one level per dot. Inline
    ``[[LLk]]`` tokens inside the text attach media to the step.
``[[LLn]]``
    Attaches the media URL that ``LLn`` maps to in the link map.

Any other line continues the previous step. Step text is kept verbatim; it is
not run through the inline formatter.

Example
-------
>>> from rc_instructions.legacy_parser import parse_legacy
>>> text = "[[TT1]]\nTitle\n[[SS1]] Step one\n[[LL1]]"
>>> model = parse_legacy(text, {"LL1": "a.mp4"})
>>> model.sections[0].title, model.sections[0].steps[0].media_urls
('Title', ['a.mp4'])
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from .errors import InvalidInputError
from .models import InstructionModel, Section, Step

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"^\[\[TT(\d+(?:\.\d+)*)\]\]\s*(.*)$", re.IGNORECASE)
LINK_LINE_PATTERN = re.compile(r"^\[\[LL(\d+)\]\]$", re.IGNORECASE)
STEP_PATTERN = re.compile(r"^\[\[SS(\d+(?:\.\d+)*)\]\]\s*(.*)$", re.IGNORECASE)
INLINE_LINK_PATTERN = re.compile(r"\[\[LL(\d+)\]\]", re.IGNORECASE)
LINE_SPLIT_PATTERN = re.compile(r"\r?\n")


def normalize_link_key(key: str) -> str:
    """Return ``key`` in canonical ``LL<digits>`` form.

    A bare number gains the ``LL`` prefix and the prefix is upper-cased, so
    ``"1"``, ``"ll1"`` and ``"LL1"`` all normalise to ``"LL1"``.
    """
    stripped = str(key).strip()
    if stripped[:2].upper() == "LL":
        return f"LL{stripped[2:]}"
    return f"LL{stripped}"


def resolve_link(key: str, link_map: typ.Mapping[str, str] | None) -> str:
    """Look up ``key`` in ``link_map`` ignoring case; ``""`` when unresolved."""
    if not link_map:
        return ""
    normalized = normalize_link_key(key)
    for candidate in (normalized, normalized.upper(), normalized.lower()):
        url = link_map.get(candidate)
        if url:
            return url
    folded = normalized.casefold()
    for map_key, url in link_map.items():
        if url and normalize_link_key(map_key).casefold() == folded:
            return url
    return ""


@dc.dataclass(slots=True)
class _LegacyState:
    """Accumulator threaded through the line loop."""

    link_map: typ.Mapping[str, str]
    sections: list[Section] = dc.field(default_factory=list)
    current: Section | None = None
    expecting_title: bool = False
    pending_keys: list[str] = dc.field(default_factory=list)
    pending_urls: list[str] = dc.field(default_factory=list)

    @property
    def has_current_section(self) -> bool:
        return self.current is not None

    def resolve(self, keys: typ.Iterable[str]) -> list[str]:
        return [url for key in keys if (url := resolve_link(key, self.link_map))]

    def open_section(self, index: str, *, claim_pending: bool = True) -> Section:
        section = Section(index=index)
        self.sections.append(section)
        self.current = section
        if claim_pending:
            self._flush_pending(section)
        return section

    def ensure_section(self) -> Section:
        if self.current is None:
            return self.open_section("0", claim_pending=False)
        return self.current

    def add_step(self, step: Step) -> None:
        self.ensure_section().steps.append(step)
        self._flush_pending(step)

    def attach(self, keys: list[str]) -> None:
        urls = self.resolve(keys)
        if self.current is None:
            self.pending_keys.extend(keys)
            self.pending_urls.extend(urls)
        elif (step := self.current.last_step) is not None:
            step.attach_media(urls, keys)
        else:
            self.current.attach_media(urls, keys)

    def _flush_pending(self, owner: Section | Step) -> None:
        if self.pending_keys or self.pending_urls:
            owner.attach_media(self.pending_urls, self.pending_keys)
            self.pending_keys = []
            self.pending_urls = []


def _handle_line(state: _LegacyState, line: str) -> None:
    if match := TITLE_PATTERN.match(line):
        section = state.open_section(match.group(1))
        inline_title = match.group(2).strip()
        section.title = inline_title
        state.expecting_title = not inline_title
        return

    if match := LINK_LINE_PATTERN.match(line):
        state.attach([f"LL{match.group(1)}"])
        return

    if match := STEP_PATTERN.match(line):
        number = match.group(1)
        keys: list[str] = []

        def _strip_link(link: re.Match[str]) -> str:
            keys.append(f"LL{link.group(1)}")
            return ""

        text = INLINE_LINK_PATTERN.sub(_strip_link, match.group(2)).strip()
        step = Step(number=number, text=text, level=number.count("."))
        if keys:
            step.attach_media(state.resolve(keys), keys)
        state.add_step(step)
        state.expecting_title = False
        return

    if state.expecting_title and state.has_current_section:
        state.current.title = line
        state.expecting_title = False
        return

    previous = state.current.last_step if state.current is not None else None
    if previous is not None:
        previous.append_text(line)
    else:
        state.add_step(Step(number=None, text=line, level=0))


def parse_legacy(
    text: str, link_map: typ.Mapping[str, str] | None = None
) -> InstructionModel:
    """Parse legacy token text into an :class:`InstructionModel`.

    Parameters
    ----------
    text : str
        Phrase text using ``[[TTn]]``/``[[SSn]]``/``[[LLn]]`` tokens.
    link_map : Mapping[str, str], optional
        Maps ``LLn`` keys to media URLs. Lookup ignores case and accepts bare
        numbers. Keys without a URL are kept in ``media_keys`` but dropped
        from ``media_urls``.

    Returns
    -------
    InstructionModel
        Parsed sections. When the text produced no section at all (for
        example, blank input) a single section holds the raw text as step
        ``"1"``.

    Raises
    ------
    InvalidInputError
        If ``text`` is not a string.
    """
    if not isinstance(text, str):
        msg = f"legacy instruction text must be a string, got {type(text).__name__}"
        raise InvalidInputError(msg)

    state = _LegacyState(link_map=link_map or {})
    for raw in LINE_SPLIT_PATTERN.split(text):
        line = raw.strip()
        if line:
            _handle_line(state, line)

    if not state.sections:
        logger.debug("legacy text produced no sections; wrapping raw text")
        fallback = Section(index="0", steps=[Step(number="1", text=text)])
        fallback.attach_media(state.pending_urls, state.pending_keys)
        state.sections.append(fallback)

    return InstructionModel(sections=tuple(state.sections))


__all__ = ["normalize_link_key", "parse_legacy", "resolve_link"]
