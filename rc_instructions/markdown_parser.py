r"""Parse Markdown-authored instructions into sections and steps.

Headings start sections; list items (numbered, bulleted or task items) become
steps whose nesting level follows their indentation. Fenced code blocks,
horizontal rules and blockquotes become tagged block steps. Images and links
to media files attach to the step they appear in, to the last step when they
sit on a line of their own, or to the section when no step exists yet.

Example
-------
>>> from rc_instructions.markdown_parser import parse_markdown
>>> model = parse_markdown("# Setup\n1. First\n2. Second\n   - Sub")
>>> model.sections[0].title, [step.level for step in model.sections[0].steps]
('Setup', [0, 0, 1])
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
from html import escape

from ._constants import (
    BLOCKQUOTE_TEMPLATE,
    CHECKBOX_CHECKED,
    CHECKBOX_UNCHECKED,
    CODE_BLOCK_TEMPLATE,
    CODE_LANGUAGE_ATTRIBUTE,
    HR_MARKUP,
    LINE_BREAK,
)
from .errors import InvalidInputError
from .inline import format_inline
from .media import extract_media
from .models import InstructionModel, Section, Step, empty_model

logger = logging.getLogger(__name__)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
FENCE_PATTERN = re.compile(r"^```(\w*)")
HR_PATTERN = re.compile(r"^(\*{3,}|-{3,}|_{3,})\s*$")
BLOCKQUOTE_PATTERN = re.compile(r"^>\s*(.+)$")
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
NUMBERED_ITEM_PATTERN = re.compile(r"^(\s*)(\d+)\.\s+(.+)$")
TASK_ITEM_PATTERN = re.compile(r"^(\s*)([-*+])\s+\[([ xX])\]\s+(.+)$")
BULLET_ITEM_PATTERN = re.compile(r"^(\s*)([-*+])\s+(.+)$")


@dc.dataclass(slots=True)
class ListItem:
    """A list line split into its parts.

    Attributes
    ----------
    indent : int
        Number of leading whitespace characters.
    marker : str
        The digits of a numbered item, or ``-``/``*``/``+`` for bullets.
    content : str
        Item text after the marker (and checkbox, for tasks).
    is_task : bool
        ``True`` for ``- [ ]``/``- [x]`` items.
    task_checked : bool
        ``True`` when a task item is ticked.
    """

    indent: int
    marker: str
    content: str
    is_task: bool = False
    task_checked: bool = False

    @property
    def is_numbered(self) -> bool:
        return self.marker.isdigit()


def parse_list_item(line: str) -> ListItem | None:
    """Return the list item on ``line`` or ``None`` when it is not one."""
    if match := NUMBERED_ITEM_PATTERN.match(line):
        indent, marker, content = match.groups()
        return ListItem(len(indent), marker, content)
    if match := TASK_ITEM_PATTERN.match(line):
        indent, marker, check, content = match.groups()
        return ListItem(
            len(indent), marker, content, is_task=True, task_checked=check in "xX"
        )
    if match := BULLET_ITEM_PATTERN.match(line):
        indent, marker, content = match.groups()
        return ListItem(len(indent), marker, content)
    return None


def nesting_level(indent: int, spaces_per_level: int = 2) -> int:
    """Convert leading whitespace into a zero-based nesting level."""
    if spaces_per_level <= 0:
        return 0
    return indent // spaces_per_level


@dc.dataclass(slots=True)
class _MarkdownState:
    """Accumulator threaded through the line loop."""

    spaces_per_level: int
    sections: list[Section] = dc.field(default_factory=list)
    current: Section | None = None
    pending_urls: list[str] = dc.field(default_factory=list)
    in_code_block: bool = False
    code_lines: list[str] = dc.field(default_factory=list)
    code_language: str = ""

    @property
    def has_current_section(self) -> bool:
        return self.current is not None

    def open_section(self, title: str, *, claim_pending: bool = True) -> Section:
        section = Section(index=str(len(self.sections)), title=title)
        self.sections.append(section)
        self.current = section
        if claim_pending and self.pending_urls:
            section.attach_media(self.pending_urls)
            self.pending_urls = []
        return section

    def ensure_section(self) -> Section:
        # Implicit sections leave pending media for the step that needs them.
        if self.current is None:
            return self.open_section("", claim_pending=False)
        return self.current

    def add_step(self, step: Step) -> Step:
        self.ensure_section().steps.append(step)
        if self.pending_urls:
            step.attach_media(self.pending_urls)
            self.pending_urls = []
        return step

    def last_step(self) -> Step | None:
        return self.current.last_step if self.current is not None else None


def _close_code_block(state: _MarkdownState) -> None:
    code = escape("\n".join(state.code_lines), quote=False)
    language = (
        CODE_LANGUAGE_ATTRIBUTE.format(language=state.code_language)
        if state.code_language
        else ""
    )
    state.add_step(
        Step(
            number=None,
            text=CODE_BLOCK_TEMPLATE.format(language=language, code=code),
            level=0,
            is_code_block=True,
        )
    )
    state.code_lines = []
    state.code_language = ""


def _add_blockquote(state: _MarkdownState, content: str) -> None:
    quote = format_inline(content)
    previous = state.last_step()
    if previous is not None and previous.is_blockquote:
        # Extend inside the closing tag so the quote stays one element.
        closing = "</blockquote>"
        body = previous.text.removesuffix(closing)
        previous.text = f"{body}{LINE_BREAK}{quote}{closing}"
        return
    state.add_step(
        Step(
            number=None,
            text=BLOCKQUOTE_TEMPLATE.format(text=quote),
            level=0,
            is_blockquote=True,
        )
    )


def _add_list_item(state: _MarkdownState, item: ListItem) -> None:
    extraction = extract_media(item.content)
    formatted = format_inline(extraction.clean_text)
    if item.is_task:
        checkbox = CHECKBOX_CHECKED if item.task_checked else CHECKBOX_UNCHECKED
        display = f"{checkbox}{formatted}"
    elif item.is_numbered:
        display = f"{item.marker}. {formatted}"
    else:
        display = f"{item.marker} {formatted}"

    step = Step(
        number=item.marker if item.is_numbered else None,
        text=display,
        level=nesting_level(item.indent, state.spaces_per_level),
        is_task=item.is_task,
        task_checked=item.task_checked,
    )
    if extraction.urls:
        step.attach_media(extraction.urls)
    state.add_step(step)


def _attach_standalone_media(state: _MarkdownState, urls: list[str]) -> None:
    previous = state.last_step()
    if previous is not None:
        previous.attach_media(urls)
    elif state.has_current_section:
        state.current.attach_media(urls)
    else:
        state.pending_urls.extend(urls)


def _handle_line(state: _MarkdownState, raw: str) -> None:
    line = raw.rstrip()

    if match := FENCE_PATTERN.match(line):
        if state.in_code_block:
            state.in_code_block = False
            _close_code_block(state)
        else:
            state.in_code_block = True
            state.code_language = match.group(1)
            state.code_lines = []
        return
    if state.in_code_block:
        state.code_lines.append(line)
        return
    if not line.strip():
        return

    if HR_PATTERN.match(line):
        state.add_step(Step(number=None, text=HR_MARKUP, level=0, is_hr=True))
        return
    if match := BLOCKQUOTE_PATTERN.match(line):
        _add_blockquote(state, match.group(1))
        return
    if match := HEADING_PATTERN.match(line):
        state.open_section(format_inline(match.group(2).strip()))
        return
    if (item := parse_list_item(line)) is not None:
        _add_list_item(state, item)
        return

    extraction = extract_media(line)
    if extraction.urls:
        _attach_standalone_media(state, extraction.urls)
    plain = extraction.clean_text
    if not plain:
        return

    previous = state.last_step()
    if previous is not None:
        previous.append_text(format_inline(plain))
    else:
        state.add_step(Step(number=None, text=format_inline(plain), level=0))


def parse_markdown(
    text: str, *, spaces_per_level: int = 2, strict_mode: bool = False
) -> InstructionModel:
    """Parse Markdown instruction text into an :class:`InstructionModel`.

    Parameters
    ----------
    text : str
        Markdown source.
    spaces_per_level : int, optional
        Indentation width of one nesting level for list items. Defaults to
        ``2``.
    strict_mode : bool, optional
        Raise :class:`InvalidInputError` for non-string input instead of
        returning the empty model. Defaults to ``False``.

    Returns
    -------
    InstructionModel
        Parsed sections. Text that yields no section at all is wrapped in a
        single untitled section holding the formatted text as one step.

    Raises
    ------
    InvalidInputError
        If ``text`` is not a string and ``strict_mode`` is set.

    Notes
    -----
    A code fence left open at the end of the text is discarded along with
    its collected lines.
    """
    if not isinstance(text, str):
        msg = f"markdown instruction text must be a string, got {type(text).__name__}"
        if strict_mode:
            raise InvalidInputError(msg)
        logger.warning(msg)
        return empty_model()

    state = _MarkdownState(spaces_per_level=spaces_per_level)
    for raw in LINE_SPLIT_PATTERN.split(text):
        _handle_line(state, raw)

    if not state.sections:
        logger.debug("markdown text produced no sections; wrapping formatted text")
        fallback = Section(
            index="0", steps=[Step(number=None, text=format_inline(text), level=0)]
        )
        fallback.attach_media(state.pending_urls)
        state.sections.append(fallback)

    return InstructionModel(sections=tuple(state.sections))


__all__ = ["ListItem", "nesting_level", "parse_list_item", "parse_markdown"]
