r"""Decide which instruction lines the stepper shows at a given position.

The stepper walks the flat step order one step at a time. At position ``i``
it shows the current step and up to ``history_depth`` steps before it, never
anything after it. Ellipsis entries mark hidden steps on either side, and a
section title is inserted before the first visible step of each titled
section. Everything here is a pure function of the model and the position.

Example
-------
>>> from rc_instructions.markdown_parser import parse_markdown
>>> from rc_instructions.stepper import compute_window
>>> model = parse_markdown("1. a\n2. b\n3. c\n4. d\n5. e")
>>> window = compute_window(model, 3, history_depth=1)
>>> window.visible_indices, window.leading_ellipsis, window.trailing_ellipsis
([2, 3], True, True)
"""

from __future__ import annotations

import dataclasses as dc
import enum

from ._constants import ELLIPSIS, VIDEO_EXTENSION_PATTERN
from .models import FlatStepRef, InstructionModel


class EntryKind(str, enum.Enum):
    """What a stepper line represents."""

    STEP = "step"
    TITLE = "title"
    ELLIPSIS = "ellipsis"


class EntryState(str, enum.Enum):
    """Visual emphasis of a stepper line."""

    PAST = "past"
    CURRENT = "current"
    NORMAL = "normal"


@dc.dataclass(frozen=True, slots=True)
class WindowEntry:
    """One line of stepper output.

    Attributes
    ----------
    kind : EntryKind
        Step, section title or ellipsis.
    text : str
        Step text, section title, or ``"…"``.
    state : EntryState
        ``past`` lines are dimmed, the ``current`` line is emphasised and
        ``normal`` is used when every step is shown.
    level : int
        Nesting level for step lines; ``0`` otherwise.
    flat_index : int | None
        Position in the flat step order for step lines.
    ref : FlatStepRef | None
        Section/step pointer for step lines.
    section_index : int | None
        Owning section for step and title lines.
    """

    kind: EntryKind
    text: str
    state: EntryState
    level: int = 0
    flat_index: int | None = None
    ref: FlatStepRef | None = None
    section_index: int | None = None


@dc.dataclass(frozen=True, slots=True)
class StepperWindow:
    """Lines to display for one stepper position."""

    entries: tuple[WindowEntry, ...]
    leading_ellipsis: bool
    trailing_ellipsis: bool
    current_index: int

    @property
    def visible_indices(self) -> list[int]:
        """Flat indices of the step lines in display order."""
        return [
            entry.flat_index
            for entry in self.entries
            if entry.kind is EntryKind.STEP and entry.flat_index is not None
        ]

    @property
    def is_empty(self) -> bool:
        """``True`` when nothing should be drawn, not even the container."""
        return not self.entries

    @property
    def can_go_back(self) -> bool:
        """Whether earlier steps are hidden above the window."""
        return self.leading_ellipsis

    @property
    def can_go_forward(self) -> bool:
        """Whether later steps remain to be reached."""
        return self.trailing_ellipsis


def clamp_index(model: InstructionModel, index: int) -> int:
    """Clamp ``index`` into the model's flat step range (``0`` when empty)."""
    total = len(model.flat_steps)
    if total == 0:
        return 0
    return max(0, min(int(index), total - 1))


def _coerce_history(history_depth: object) -> int:
    try:
        depth = int(history_depth)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
    return max(depth, 0)


def has_visible_text(model: InstructionModel) -> bool:
    """Return ``True`` when at least one step has non-blank text."""
    return any(
        step.text and step.text.strip()
        for section in model.sections
        for step in section.steps
    )


def compute_window(
    model: InstructionModel,
    current_index: int,
    history_depth: int = 1,
    *,
    show_all: bool = False,
) -> StepperWindow:
    """Compute the stepper lines for ``current_index``.

    Parameters
    ----------
    model : InstructionModel
        Parsed instructions; never modified.
    current_index : int
        Position in the flat step order, clamped into range.
    history_depth : int, optional
        How many steps before the current one stay visible. Negative or
        non-numeric values count as ``0``. Defaults to ``1``.
    show_all : bool, optional
        Show every step in ``normal`` state without ellipses.

    Returns
    -------
    StepperWindow
        The ordered entries plus ellipsis flags. A model without any step
        text yields an empty window.
    """
    flat_steps = model.flat_steps
    total = len(flat_steps)
    current = clamp_index(model, current_index)
    if total == 0 or not has_visible_text(model):
        return StepperWindow((), False, False, current)

    if show_all:
        start, end = 0, total - 1
        leading = trailing = False
    else:
        history = _coerce_history(history_depth)
        start, end = max(0, current - history), current
        leading = current > history
        trailing = current < total - 1

    entries: list[WindowEntry] = []
    if leading:
        entries.append(WindowEntry(EntryKind.ELLIPSIS, ELLIPSIS, EntryState.PAST))

    previous_section: int | None = None
    for flat_index in range(start, end + 1):
        ref = flat_steps[flat_index]
        section = model.sections[ref.section_index]
        step = section.steps[ref.step_index]
        if not step.text.strip():
            continue
        if show_all:
            state = EntryState.NORMAL
        elif flat_index < current:
            state = EntryState.PAST
        else:
            state = EntryState.CURRENT
        if section.title and ref.section_index != previous_section:
            entries.append(
                WindowEntry(
                    EntryKind.TITLE,
                    section.title,
                    state,
                    section_index=ref.section_index,
                )
            )
        entries.append(
            WindowEntry(
                EntryKind.STEP,
                step.text,
                state,
                level=step.level,
                flat_index=flat_index,
                ref=ref,
                section_index=ref.section_index,
            )
        )
        previous_section = ref.section_index

    if trailing:
        entries.append(WindowEntry(EntryKind.ELLIPSIS, ELLIPSIS, EntryState.CURRENT))

    return StepperWindow(tuple(entries), leading, trailing, current)


def select_media(model: InstructionModel, current_index: int) -> str | None:
    """Pick the single media URL to show at ``current_index``.

    Media attached to the current step wins over the section's media; when
    several URLs are attached the last one is chosen.
    """
    flat_steps = model.flat_steps
    if not flat_steps:
        return None
    ref = flat_steps[clamp_index(model, current_index)]
    section = model.sections[ref.section_index]
    step = section.steps[ref.step_index]
    step_urls = [url for url in step.media_urls or () if url]
    urls = step_urls or [url for url in section.media_urls if url]
    return urls[-1] if urls else None


def media_kind(url: str) -> str:
    """Return ``"video"`` for ``.mp4`` URLs and ``"image"`` for anything else."""
    return "video" if VIDEO_EXTENSION_PATTERN.search(url) else "image"


__all__ = [
    "EntryKind",
    "EntryState",
    "StepperWindow",
    "WindowEntry",
    "clamp_index",
    "compute_window",
    "has_visible_text",
    "media_kind",
    "select_media",
]
