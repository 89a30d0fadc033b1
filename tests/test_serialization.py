"""Unit tests for JSON encoding of instruction models."""

from __future__ import annotations

import msgspec.json as msgspec_json
import pytest

from rc_instructions.errors import InvalidInputError
from rc_instructions.legacy_parser import parse_legacy
from rc_instructions.serialization import decode_model, encode_model


def test_encoded_model_uses_camel_case_keys() -> None:
    """Rendering layers expect the camelCase sections/flatSteps shape."""
    model = parse_legacy("[[TT1]] Setup\n[[SS1]] Hold\n[[LL1]]", {"LL1": "a.mp4"})
    payload = msgspec_json.decode(encode_model(model))
    assert payload["flatSteps"] == [{"sectionIdx": 0, "stepIdx": 0}], (
        f"unexpected flat steps {payload['flatSteps']!r}"
    )
    step = payload["sections"][0]["steps"][0]
    assert step["mediaKeys"] == ["LL1"], f"unexpected step payload {step!r}"
    assert step["mediaUrls"] == ["a.mp4"], f"unexpected step payload {step!r}"
    assert "isCodeBlock" not in step, "false tags should be omitted"


def test_decoded_model_equals_original() -> None:
    """Decoding restores the dataclasses the encoder started from."""
    model = parse_legacy("[[TT1]] Setup\n[[SS1]] Hold\n[[SS1.1]] Still")
    assert decode_model(encode_model(model)) == model, "round trip should be exact"


@pytest.mark.parametrize("payload", [b"{not json", b"[1, 2]", "null"])
def test_bad_payloads_raise(payload: bytes | str) -> None:
    """Invalid JSON and non-object payloads are rejected."""
    with pytest.raises(InvalidInputError):
        decode_model(payload)
