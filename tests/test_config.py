"""Unit tests for loading instruction parser configuration."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from rc_instructions import compute_window, parse_instructions
from rc_instructions.config import (
    InstructionConfigError,
    ParserDefaults,
    load_instruction_config,
)
from rc_instructions.models import InstructionFormat

if typ.TYPE_CHECKING:
    from pathlib import Path

FULL_CONFIG = dedent(
    """\
    defaults:
      format: Markdown
      spaces_per_level: 4
      strict_mode: true
      validate: true
      stepper_history: 2
      language: de
    asset_maps:
      distance:
        1: "https://cdn.invalid/Instruction 1.mp4"
        ll2: https://cdn.invalid/two.png
        LL3: ""
        intro: https://cdn.invalid/intro.png
    phrases:
      RC_STEPS_MD:
        en: "# Setup\\n1. Find a card"
        de: ""
      RC_BROKEN: not-a-mapping
    """
)


def _write(tmp_path: Path, content: str) -> Path:
    """Write ``content`` to ``instructions.yaml`` under ``tmp_path``."""
    config_path = tmp_path / "instructions.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_full_config_is_loaded(tmp_path: Path) -> None:
    """Every option, asset map and phrase is read and normalised."""
    config = load_instruction_config(_write(tmp_path, FULL_CONFIG))
    assert config.defaults == ParserDefaults(
        format=InstructionFormat.MARKDOWN,
        spaces_per_level=4,
        strict_mode=True,
        validate=True,
        stepper_history=2,
        language="de",
    ), f"unexpected defaults {config.defaults!r}"
    assert config.get_asset_map("distance") == {
        "LL1": "https://cdn.invalid/Instruction 1.mp4",
        "LL2": "https://cdn.invalid/two.png",
        "intro": "https://cdn.invalid/intro.png",
    }, "link keys should be normalised and blank URLs dropped"
    assert config.phrases == {"RC_STEPS_MD": {"en": "# Setup\n1. Find a card"}}, (
        f"unexpected phrases {config.phrases!r}"
    )


def test_parser_options_feed_parse_instructions(tmp_path: Path) -> None:
    """Options built from the config drive a parse end to end."""
    config = load_instruction_config(_write(tmp_path, FULL_CONFIG))
    options = config.parser_options("distance")
    assert options["spaces_per_level"] == 4, "width should come from defaults"
    options["format"] = InstructionFormat.LEGACY
    model = parse_instructions("[[SS1]] Hold\n[[LL1]]", **options)
    assert model.sections[0].steps[0].media_urls == [
        "https://cdn.invalid/Instruction 1.mp4"
    ], "configured asset map should resolve the link"


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    """An empty file yields the built-in defaults."""
    config = load_instruction_config(_write(tmp_path, ""))
    assert config.defaults == ParserDefaults(), "expected default options"
    assert config.asset_maps == {}, "expected no asset maps"


def test_unknown_asset_map_lists_known_names(tmp_path: Path) -> None:
    """Asking for a missing map names the ones that exist."""
    config = load_instruction_config(_write(tmp_path, FULL_CONFIG))
    with pytest.raises(KeyError, match="Known asset maps: distance"):
        config.get_asset_map("acuity")


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing configuration file is reported clearly."""
    with pytest.raises(FileNotFoundError, match="not found"):
        load_instruction_config(tmp_path / "absent.yaml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    """A YAML list at the top level is rejected."""
    with pytest.raises(TypeError, match="mapping"):
        load_instruction_config(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("defaults:\n  format: html\n", "Unknown instruction format"),
        ("defaults:\n  spaces_per_level: 0\n", "at least 1"),
        ("defaults:\n  stepper_history: -1\n", "non-negative integer"),
        ("defaults:\n  strict_mode: yes\n", "true or false"),
        ("defaults: [1]\n", "'defaults' must be a mapping"),
        ("asset_maps:\n  distance: [a]\n", "Asset map 'distance'"),
    ],
)
def test_invalid_options_raise(tmp_path: Path, content: str, message: str) -> None:
    """Invalid option values raise InstructionConfigError."""
    with pytest.raises(InstructionConfigError, match=message):
        load_instruction_config(_write(tmp_path, content))


def test_configured_language_is_the_phrase_fallback(tmp_path: Path) -> None:
    """Phrases missing the requested language use the configured language."""
    content = dedent(
        """\
        defaults:
          language: fr
        phrases:
          RC_NOTE_MD:
            en: "**Hold**"
            fr: "**Tenez**"
        """
    )
    config = load_instruction_config(_write(tmp_path, content))
    model = config.instruction_model("RC_NOTE_MD", "it")
    text = model.sections[0].steps[0].text
    assert text == "<strong>Tenez</strong>", f"expected the French phrase, got {text!r}"
    assert config.phrase_options()["fallback_language"] == "fr", (
        "phrase options should carry the configured language"
    )


def test_window_options_use_configured_history(tmp_path: Path) -> None:
    """The configured stepper history sets the window depth."""
    config = load_instruction_config(_write(tmp_path, FULL_CONFIG))
    assert config.window_options() == {"history_depth": 2}, "unexpected options"
    five = parse_instructions("1. a\n2. b\n3. c\n4. d\n5. e")
    window = compute_window(five, 3, **config.window_options())
    assert window.visible_indices == [1, 2, 3], (
        f"expected two steps of history, got {window.visible_indices}"
    )
