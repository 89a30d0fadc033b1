"""Utility helpers shared by the instruction configuration loader."""

from __future__ import annotations

import typing as typ

from rc_instructions.errors import InstructionConfigError
from rc_instructions.legacy_parser import normalize_link_key
from rc_instructions.models import InstructionFormat

from .models import ParserDefaults


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object, field: str) -> bool:
    """Return ``value`` unchanged when it is a YAML boolean."""
    if isinstance(value, bool):
        return value
    msg = f"'{field}' must be true or false, got {value!r}"
    raise InstructionConfigError(msg)


def _coerce_non_negative_int(value: object, field: str) -> int:
    """Return ``value`` when it is a non-negative integer."""
    match value:
        case bool():
            pass
        case int() if value >= 0:
            return value
    msg = f"'{field}' must be a non-negative integer, got {value!r}"
    raise InstructionConfigError(msg)


def _coerce_format(value: object) -> InstructionFormat:
    """Return the instruction format named by ``value``."""
    text = _optional_str(value) or InstructionFormat.AUTO.value
    try:
        return InstructionFormat(text.lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in InstructionFormat)
        msg = f"Unknown instruction format '{text}'. Expected one of: {allowed}"
        raise InstructionConfigError(msg) from exc


def _build_defaults(payload: typ.Mapping[str, typ.Any]) -> ParserDefaults:
    """Build ParserDefaults from the ``defaults`` mapping."""
    base = ParserDefaults()
    spaces = _coerce_non_negative_int(
        payload.get("spaces_per_level", base.spaces_per_level), "spaces_per_level"
    )
    if spaces == 0:
        msg = "'spaces_per_level' must be at least 1"
        raise InstructionConfigError(msg)
    return ParserDefaults(
        format=_coerce_format(payload.get("format", base.format.value)),
        spaces_per_level=spaces,
        strict_mode=_coerce_bool(
            payload.get("strict_mode", base.strict_mode), "strict_mode"
        ),
        validate=_coerce_bool(payload.get("validate", base.validate), "validate"),
        stepper_history=_coerce_non_negative_int(
            payload.get("stepper_history", base.stepper_history), "stepper_history"
        ),
        language=_optional_str(payload.get("language")) or base.language,
    )


def _normalize_asset_key(key: object) -> str:
    """Canonicalise ``LLn`` and bare-number keys; keep other names as written."""
    text = str(key).strip()
    if text[:2].upper() == "LL" or text.isdigit():
        return normalize_link_key(text)
    return text


def _build_asset_map(name: str, payload: object) -> dict[str, str]:
    """Build one asset map, dropping keys without a URL."""
    if not isinstance(payload, dict):
        msg = f"Asset map '{name}' must be a mapping of keys to URLs."
        raise InstructionConfigError(msg)
    result: dict[str, str] = {}
    for key, url in payload.items():
        text = _optional_str(url)
        if text is not None:
            result[_normalize_asset_key(key)] = text
    return result


def _build_phrases(payload: object) -> dict[str, dict[str, str]]:
    """Return the phrase table, skipping entries that are not mappings."""
    if not isinstance(payload, dict):
        return {}
    phrases: dict[str, dict[str, str]] = {}
    for key, translations in payload.items():
        if not isinstance(translations, dict):
            continue
        phrases[str(key)] = {
            str(lang): str(text) for lang, text in translations.items() if text
        }
    return phrases


__all__ = [
    "_build_asset_map",
    "_build_defaults",
    "_build_phrases",
    "_coerce_bool",
    "_coerce_format",
    "_coerce_non_negative_int",
    "_normalize_asset_key",
    "_optional_str",
]
