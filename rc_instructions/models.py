r"""Dataclasses describing parsed step-by-step instructions.

Both grammar parsers return an :class:`InstructionModel`: an ordered tuple of
:class:`Section` objects, each holding the :class:`Step` entries that the
stepper walks through. The flattened navigation order is derived from the
sections on demand so it always matches them.

Example
-------
>>> from rc_instructions.models import InstructionModel, Section, Step
>>> section = Section(index="0", title="Setup", steps=[Step(None, "Hold still")])
>>> model = InstructionModel(sections=(section,))
>>> model.flat_steps
(FlatStepRef(section_index=0, step_index=0),)
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class InstructionFormat(str, enum.Enum):
    """Grammar used by a piece of instruction text."""

    LEGACY = "legacy"
    MARKDOWN = "markdown"
    AUTO = "auto"


@dc.dataclass(slots=True)
class Step:
    """One displayable instruction line.

    Attributes
    ----------
    number : str | None
        Ordinal label such as ``"2"`` or ``"2.1"``; ``None`` for bullets,
        block elements and plain text.
    text : str
        Display text. Markdown steps hold inline-formatted HTML; legacy steps
        hold the raw line text.
    level : int
        Nesting depth, ``0`` for top-level steps.
    media_keys : list[str] | None
        Legacy link keys attached to this step, ``None`` when no media was
        attached here.
    media_urls : list[str] | None
        Resolved media URLs attached to this step, in order of appearance.
    """

    number: str | None
    text: str
    level: int = 0
    media_keys: list[str] | None = None
    media_urls: list[str] | None = None
    is_code_block: bool = False
    is_hr: bool = False
    is_blockquote: bool = False
    is_task: bool = False
    task_checked: bool = False

    def attach_media(
        self, urls: typ.Iterable[str], keys: typ.Iterable[str] = ()
    ) -> None:
        """Append media references, creating the step-level lists if needed."""
        if self.media_urls is None:
            self.media_urls = []
        if self.media_keys is None:
            self.media_keys = []
        self.media_urls.extend(urls)
        self.media_keys.extend(keys)

    def append_text(self, extra: str, separator: str = "\n") -> None:
        """Continue the step with another line of text."""
        self.text = f"{self.text}{separator}{extra}" if self.text else extra

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the camelCase mapping consumed by rendering layers."""
        payload: dict[str, typ.Any] = {
            "number": self.number,
            "text": self.text,
            "level": self.level,
        }
        if self.media_keys is not None:
            payload["mediaKeys"] = list(self.media_keys)
        if self.media_urls is not None:
            payload["mediaUrls"] = list(self.media_urls)
        if self.is_code_block:
            payload["isCodeBlock"] = True
        if self.is_hr:
            payload["isHr"] = True
        if self.is_blockquote:
            payload["isBlockquote"] = True
        if self.is_task:
            payload["isTask"] = True
            payload["taskChecked"] = self.task_checked
        return payload

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> Step:
        """Build a step from its camelCase mapping."""
        keys = payload.get("mediaKeys")
        urls = payload.get("mediaUrls")
        return cls(
            number=payload.get("number"),
            text=payload.get("text", ""),
            level=int(payload.get("level", 0) or 0),
            media_keys=list(keys) if keys is not None else None,
            media_urls=list(urls) if urls is not None else None,
            is_code_block=bool(payload.get("isCodeBlock", False)),
            is_hr=bool(payload.get("isHr", False)),
            is_blockquote=bool(payload.get("isBlockquote", False)),
            is_task=bool(payload.get("isTask", False)),
            task_checked=bool(payload.get("taskChecked", False)),
        )


@dc.dataclass(slots=True)
class Section:
    """A titled group of steps.

    Attributes
    ----------
    index : str
        Identifier assigned when the section was created; legacy title tokens
        supply it directly, Markdown uses the section's ordinal position.
    title : str
        Section heading, possibly empty.
    steps : list[Step]
        Steps in parse order.
    media_keys : list[str]
        Legacy link keys attached to the section itself.
    media_urls : list[str]
        Media URLs attached to the section itself.
    """

    index: str
    title: str = ""
    steps: list[Step] = dc.field(default_factory=list)
    media_keys: list[str] = dc.field(default_factory=list)
    media_urls: list[str] = dc.field(default_factory=list)

    @property
    def last_step(self) -> Step | None:
        """Return the most recently added step, if any."""
        return self.steps[-1] if self.steps else None

    def attach_media(
        self, urls: typ.Iterable[str], keys: typ.Iterable[str] = ()
    ) -> None:
        """Append section-level media references."""
        self.media_urls.extend(urls)
        self.media_keys.extend(keys)

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the camelCase mapping consumed by rendering layers."""
        return {
            "index": self.index,
            "title": self.title,
            "steps": [step.to_dict() for step in self.steps],
            "mediaKeys": list(self.media_keys),
            "mediaUrls": list(self.media_urls),
        }

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> Section:
        """Build a section from its camelCase mapping."""
        return cls(
            index=str(payload.get("index", "0")),
            title=payload.get("title", ""),
            steps=[Step.from_dict(step) for step in payload.get("steps", [])],
            media_keys=list(payload.get("mediaKeys", [])),
            media_urls=list(payload.get("mediaUrls", [])),
        )


@dc.dataclass(frozen=True, slots=True)
class FlatStepRef:
    """Zero-based pointer to ``sections[section_index].steps[step_index]``."""

    section_index: int
    step_index: int

    def to_dict(self) -> dict[str, int]:
        """Return the camelCase mapping consumed by rendering layers."""
        return {"sectionIdx": self.section_index, "stepIdx": self.step_index}


@dc.dataclass(frozen=True, slots=True)
class InstructionModel:
    """Parsed instructions plus the derived linear navigation order."""

    sections: tuple[Section, ...] = ()

    @property
    def flat_steps(self) -> tuple[FlatStepRef, ...]:
        """Return every step reference in section order, then step order."""
        return tuple(
            FlatStepRef(section_idx, step_idx)
            for section_idx, section in enumerate(self.sections)
            for step_idx in range(len(section.steps))
        )

    def step_at(self, ref: FlatStepRef) -> Step:
        """Return the step addressed by ``ref``."""
        return self.sections[ref.section_index].steps[ref.step_index]

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the camelCase ``{sections, flatSteps}`` mapping."""
        return {
            "sections": [section.to_dict() for section in self.sections],
            "flatSteps": [ref.to_dict() for ref in self.flat_steps],
        }

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> InstructionModel:
        """Build a model from its camelCase mapping.

        ``flatSteps`` in the payload is ignored; it is always rederived from
        the sections.
        """
        return cls(
            sections=tuple(
                Section.from_dict(section) for section in payload.get("sections", [])
            )
        )


def empty_model() -> InstructionModel:
    """Return the canonical empty model: one untitled section with no steps."""
    return InstructionModel(sections=(Section(index="0"),))


__all__ = [
    "FlatStepRef",
    "InstructionFormat",
    "InstructionModel",
    "Section",
    "Step",
    "empty_model",
]
