r"""JSON encoding for instruction models.

Rendering layers consume the camelCase ``{sections, flatSteps}`` form; these
helpers encode it with :mod:`msgspec` and decode it back into dataclasses.

Example
-------
>>> from rc_instructions.markdown_parser import parse_markdown
>>> from rc_instructions.serialization import decode_model, encode_model
>>> payload = encode_model(parse_markdown("# Setup\n1. First"))
>>> decode_model(payload).sections[0].title
'Setup'
"""

from __future__ import annotations

import typing as typ

import msgspec
import msgspec.json as msgspec_json

from .errors import InvalidInputError
from .models import InstructionModel


def encode_model(model: InstructionModel) -> bytes:
    """Return the JSON bytes for ``model``'s camelCase mapping."""
    return msgspec_json.encode(model.to_dict())


def decode_model(payload: bytes | str) -> InstructionModel:
    """Rebuild an :class:`InstructionModel` from :func:`encode_model` output.

    Raises
    ------
    InvalidInputError
        If ``payload`` is not valid JSON or does not hold an object.
    """
    try:
        decoded: typ.Any = msgspec_json.decode(payload)
    except msgspec.DecodeError as exc:
        msg = f"instruction model payload is not valid JSON: {exc}"
        raise InvalidInputError(msg) from exc
    if not isinstance(decoded, dict):
        msg = "instruction model payload must be a JSON object"
        raise InvalidInputError(msg)
    return InstructionModel.from_dict(decoded)


__all__ = ["decode_model", "encode_model"]
