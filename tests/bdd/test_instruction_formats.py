"""Behaviour tests for parsing phrases in both authoring grammars.

The scenarios convert a legacy bracket-token phrase to Markdown, parse both
versions through :func:`rc_instructions.parse_instructions` and compare the
resulting structure. A second scenario checks that unusable phrase values
degrade to the canonical empty model instead of raising.

Usage
-----
Run ``pytest tests/bdd/test_instruction_formats.py -v``. The feature file
lives at ``features/instruction_formats.feature``.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, scenarios, then, when

from rc_instructions import (
    compute_window,
    convert_legacy_to_markdown,
    empty_model,
    parse_instructions,
)

if typ.TYPE_CHECKING:
    from rc_instructions.models import InstructionModel

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "instruction_formats.feature"
)
scenarios(FEATURE_FILE)

ASSET_MAP = {"LL1": "https://cdn.invalid/Instruction 1 (Revis 2).mp4"}
LEGACY_PHRASE = "[[TT1]] Setup\n[[SS1]] Find a card\n[[LL1]]\n[[SS2]] Hold it up"


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _models(scenario_state: dict[str, object]) -> list[InstructionModel]:
    return typ.cast("list[InstructionModel]", scenario_state["models"])


@given("a legacy phrase with a title, two steps and a linked video")
def given_legacy_phrase(scenario_state: dict[str, object]) -> None:
    """Store the legacy phrase."""
    scenario_state["phrases"] = [LEGACY_PHRASE]


@given("the same phrase converted to Markdown")
def given_markdown_phrase(scenario_state: dict[str, object]) -> None:
    """Convert the legacy phrase and store the Markdown version alongside it."""
    phrases = typ.cast("list[object]", scenario_state["phrases"])
    phrases.append(convert_legacy_to_markdown(LEGACY_PHRASE, ASSET_MAP))


@given("a phrase value that is not text")
def given_non_text_phrase(scenario_state: dict[str, object]) -> None:
    """Store a phrase value a broken translation table might hold."""
    scenario_state["phrases"] = [{"en": "[[SS1]] a"}]


@when("both phrases are parsed with automatic format detection")
@when("the phrase is parsed with automatic format detection")
def when_parsed(scenario_state: dict[str, object]) -> None:
    """Parse every stored phrase with the same options."""
    phrases = typ.cast("list[object]", scenario_state["phrases"])
    scenario_state["models"] = [
        parse_instructions(phrase, asset_map=ASSET_MAP) for phrase in phrases
    ]


@then('both models have one section titled "Setup"')
def then_one_setup_section(scenario_state: dict[str, object]) -> None:
    """Legacy titles and Markdown headings map onto the same section."""
    for model in _models(scenario_state):
        assert [section.title for section in model.sections] == ["Setup"], (
            f"unexpected sections {model.sections!r}"
        )


@then("both models have the same number of steps")
def then_same_step_count(scenario_state: dict[str, object]) -> None:
    """Conversion keeps every step."""
    legacy, markdown = _models(scenario_state)
    assert len(legacy.flat_steps) == len(markdown.flat_steps) == 2, (
        "expected two steps in each model"
    )


@then("the first step of both models carries the linked video")
def then_first_step_has_video(scenario_state: dict[str, object]) -> None:
    """The linked video lands on the step the link follows."""
    for model in _models(scenario_state):
        urls = model.sections[0].steps[0].media_urls
        assert urls == [ASSET_MAP["LL1"]], f"unexpected media {urls!r}"


@then("the canonical empty model is returned")
def then_empty_model(scenario_state: dict[str, object]) -> None:
    """Non-text input is replaced by the empty model."""
    assert _models(scenario_state) == [empty_model()], "expected the empty model"


@then("the stepper window for it is empty")
def then_empty_window(scenario_state: dict[str, object]) -> None:
    """The empty model renders nothing."""
    window = compute_window(_models(scenario_state)[0], 0)
    assert window.is_empty, "expected no stepper entries"
