"""Structural checks for instruction models.

:func:`validate_model` accepts either an :class:`InstructionModel` or its
camelCase mapping (as produced by :meth:`InstructionModel.to_dict` or decoded
from JSON) and reports every structural problem it finds rather than stopping
at the first.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .models import InstructionModel


@dc.dataclass(slots=True)
class ValidationResult:
    """Outcome of :func:`validate_model`.

    Attributes
    ----------
    valid : bool
        ``True`` when no errors were recorded.
    errors : list[str]
        Human-readable descriptions in the order they were found.
    """

    valid: bool
    errors: list[str] = dc.field(default_factory=list)


def _is_list(value: object) -> bool:
    return isinstance(value, cabc.Sequence) and not isinstance(value, str | bytes)


def _check_media(
    owner: str, payload: cabc.Mapping[str, typ.Any], errors: list[str]
) -> None:
    for field in ("mediaKeys", "mediaUrls"):
        if field not in payload or payload[field] is None:
            continue
        value = payload[field]
        if not _is_list(value):
            errors.append(f"{owner}: {field} must be array")
        elif not all(isinstance(item, str) for item in value):
            errors.append(f"{owner}: {field} entries must be strings")


def _check_step(owner: str, step: object, errors: list[str]) -> None:
    if not isinstance(step, cabc.Mapping):
        errors.append(f"{owner}: must be an object")
        return
    if not isinstance(step.get("text"), str):
        errors.append(f"{owner}: text must be string")
    number = step.get("number")
    if number is not None and not isinstance(number, str):
        errors.append(f"{owner}: number must be string or null")
    level = step.get("level", 0)
    if isinstance(level, bool) or not isinstance(level, int) or level < 0:
        errors.append(f"{owner}: level must be a non-negative integer")
    _check_media(owner, step, errors)


def _check_section(idx: int, section: object, errors: list[str]) -> int | None:
    """Validate one section; return its step count when the steps are usable."""
    owner = f"Section {idx}"
    if not isinstance(section, cabc.Mapping):
        errors.append(f"{owner}: must be an object")
        return None
    if not isinstance(section.get("title"), str):
        errors.append(f"{owner}: title must be string")
    if not _is_list(section.get("mediaUrls")):
        errors.append(f"{owner}: mediaUrls must be array")
    else:
        _check_media(owner, {"mediaUrls": section["mediaUrls"]}, errors)
    if "mediaKeys" in section:
        _check_media(owner, {"mediaKeys": section["mediaKeys"]}, errors)
    steps = section.get("steps")
    if not _is_list(steps):
        errors.append(f"{owner}: steps must be array")
        return None
    for step_idx, step in enumerate(steps):
        _check_step(f"{owner} step {step_idx}", step, errors)
    return len(steps)


def _check_flat_steps(
    flat_steps: cabc.Sequence[typ.Any], step_counts: list[int | None], errors: list[str]
) -> None:
    if any(count is None for count in step_counts):
        return
    expected = [
        (section_idx, step_idx)
        for section_idx, count in enumerate(step_counts)
        for step_idx in range(count or 0)
    ]
    actual: list[tuple[object, object]] = []
    for ref in flat_steps:
        if not isinstance(ref, cabc.Mapping):
            errors.append("flatSteps entries must be objects")
            return
        actual.append((ref.get("sectionIdx"), ref.get("stepIdx")))
    if actual != expected:
        errors.append("flatSteps must list every step in section order")


def validate_model(model: object) -> ValidationResult:
    """Check that ``model`` has the shape rendering layers rely on.

    Parameters
    ----------
    model : object
        An :class:`InstructionModel` or its camelCase mapping.

    Returns
    -------
    ValidationResult
        ``valid`` is ``False`` when the model is missing its ``sections`` or
        ``flatSteps`` arrays, a section or step field has the wrong type, or
        ``flatSteps`` disagrees with the sections.
    """
    errors: list[str] = []
    if isinstance(model, InstructionModel):
        try:
            payload: object = model.to_dict()
        except (AttributeError, TypeError) as exc:
            errors.append(f"Model could not be read: {exc}")
            return ValidationResult(valid=False, errors=errors)
    else:
        payload = model

    if not isinstance(payload, cabc.Mapping):
        errors.append("Model must be an object")
        return ValidationResult(valid=False, errors=errors)

    sections = payload.get("sections")
    flat_steps = payload.get("flatSteps")
    if not _is_list(sections):
        errors.append("Model must have sections array")
    if not _is_list(flat_steps):
        errors.append("Model must have flatSteps array")

    if _is_list(sections):
        step_counts = [
            _check_section(idx, section, errors) for idx, section in enumerate(sections)
        ]
        if _is_list(flat_steps):
            _check_flat_steps(flat_steps, step_counts, errors)

    return ValidationResult(valid=not errors, errors=errors)


__all__ = ["ValidationResult", "validate_model"]
