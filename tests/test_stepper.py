"""Unit tests for the stepper window computation."""

from __future__ import annotations

import typing as typ

import pytest

from rc_instructions.legacy_parser import parse_legacy
from rc_instructions.markdown_parser import parse_markdown
from rc_instructions.models import InstructionModel, Section, Step, empty_model
from rc_instructions.stepper import (
    EntryKind,
    EntryState,
    clamp_index,
    compute_window,
    has_visible_text,
    media_kind,
    select_media,
)


@pytest.fixture
def five_steps() -> InstructionModel:
    """Return an untitled model with five numbered steps."""
    return parse_markdown("1. a\n2. b\n3. c\n4. d\n5. e")


@pytest.fixture
def two_sections() -> InstructionModel:
    """Return a model with two titled sections."""
    return parse_markdown("# A\n1. a1\n2. a2\n# B\n1. b1")


def test_first_position_shows_only_current_step(five_steps: InstructionModel) -> None:
    """At the start nothing is hidden above and the rest is hidden below."""
    window = compute_window(five_steps, 0)
    assert [entry.kind for entry in window.entries] == [
        EntryKind.STEP,
        EntryKind.ELLIPSIS,
    ], "expected the first step followed by a trailing ellipsis"
    assert window.entries[0].state is EntryState.CURRENT, "first step is current"
    assert not window.can_go_back, "nothing lies before the first step"
    assert window.can_go_forward, "later steps remain"


def test_middle_position_has_history_and_both_ellipses(
    five_steps: InstructionModel,
) -> None:
    """The previous step is dimmed and hidden steps are marked on both sides."""
    window = compute_window(five_steps, 3, history_depth=1)
    assert [entry.text for entry in window.entries] == ["…", "3. c", "4. d", "…"], (
        "unexpected window text"
    )
    assert [entry.state for entry in window.entries] == [
        EntryState.PAST,
        EntryState.PAST,
        EntryState.CURRENT,
        EntryState.CURRENT,
    ], "unexpected entry states"
    assert window.visible_indices == [2, 3], "expected steps 2 and 3 visible"


def test_last_position_has_no_trailing_ellipsis(five_steps: InstructionModel) -> None:
    """Reaching the last step removes the trailing ellipsis."""
    window = compute_window(five_steps, 4)
    assert not window.trailing_ellipsis, "no steps remain after the last one"
    assert window.entries[-1].text == "5. e", "last entry should be the final step"


@pytest.mark.parametrize("history", [0, -2, "bad", None])
def test_degenerate_history_shows_only_current(
    five_steps: InstructionModel, history: object
) -> None:
    """Zero, negative and non-numeric history depths show one step."""
    depth = typ.cast("int", history)
    window = compute_window(five_steps, 2, history_depth=depth)
    assert window.visible_indices == [2], f"unexpected window for {history!r}"
    assert window.leading_ellipsis, "earlier steps are hidden"


def test_index_is_clamped(five_steps: InstructionModel) -> None:
    """Out-of-range positions are clamped into the flat step range."""
    assert compute_window(five_steps, 99).current_index == 4, "expected upper clamp"
    assert compute_window(five_steps, -5).current_index == 0, "expected lower clamp"
    assert clamp_index(empty_model(), 3) == 0, "empty models clamp to zero"


def test_show_all_lists_every_step_normally(five_steps: InstructionModel) -> None:
    """Overview mode has no ellipses and no emphasis."""
    window = compute_window(five_steps, 2, show_all=True)
    assert window.visible_indices == [0, 1, 2, 3, 4], "every step should be shown"
    assert {entry.state for entry in window.entries} == {EntryState.NORMAL}, (
        "overview entries should all be normal"
    )


def test_titles_precede_first_visible_step_of_each_section(
    two_sections: InstructionModel,
) -> None:
    """A title is inserted when the window enters a titled section."""
    window = compute_window(two_sections, 2, history_depth=1)
    assert [(entry.kind, entry.text) for entry in window.entries] == [
        (EntryKind.ELLIPSIS, "…"),
        (EntryKind.TITLE, "A"),
        (EntryKind.STEP, "2. a2"),
        (EntryKind.TITLE, "B"),
        (EntryKind.STEP, "1. b1"),
    ], "unexpected title placement"
    assert window.entries[1].state is EntryState.PAST, "title follows its step state"
    assert window.entries[3].state is EntryState.CURRENT, "current section title"


def test_empty_model_yields_empty_window() -> None:
    """Without steps nothing is rendered at all."""
    window = compute_window(empty_model(), 0)
    assert window.is_empty, "expected no entries"
    assert not (window.leading_ellipsis or window.trailing_ellipsis), "no ellipses"


def test_steps_without_text_are_skipped() -> None:
    """Blank steps keep their flat index but are not displayed."""
    model = InstructionModel(
        sections=(
            Section(index="0", steps=[Step("1", "a"), Step(None, ""), Step("2", "b")]),
        )
    )
    window = compute_window(model, 2, history_depth=2)
    assert window.visible_indices == [0, 2], "blank step should be skipped"
    assert has_visible_text(model), "model still has visible text"
    assert not has_visible_text(empty_model()), "empty model has no visible text"


@pytest.mark.parametrize("index", [0, 1])
def test_model_without_step_text_yields_empty_window(index: int) -> None:
    """Blank steps alone produce no entries and no ellipses."""
    model = parse_legacy("[[TT1]] T\n[[SS1]]\n[[SS2]]")
    assert len(model.flat_steps) == 2, "expected two blank steps"
    window = compute_window(model, index)
    assert window.is_empty, f"expected no entries, got {window.entries!r}"
    assert not (window.leading_ellipsis or window.trailing_ellipsis), "no ellipses"


def test_whitespace_only_steps_are_skipped() -> None:
    """Steps holding only whitespace count as blank."""
    model = InstructionModel(
        sections=(Section(index="0", steps=[Step("1", "a"), Step("2", "  ")]),)
    )
    window = compute_window(model, 1)
    assert window.visible_indices == [0], "whitespace step should be skipped"


def test_window_does_not_mutate_model(two_sections: InstructionModel) -> None:
    """Computing windows leaves the model untouched."""
    before = two_sections.to_dict()
    for index in range(3):
        compute_window(two_sections, index)
    assert two_sections.to_dict() == before, "model should be unchanged"


def test_select_media_prefers_step_then_section() -> None:
    """The last step URL wins; the section's media is the fallback."""
    model = parse_markdown("# T\n![](intro.png)\n1. a ![](x.png) ![](y.mp4)\n2. b")
    assert select_media(model, 0) == "y.mp4", "last step URL should win"
    assert select_media(model, 1) == "intro.png", "section media is the fallback"
    assert select_media(empty_model(), 0) is None, "no steps means no media"


@pytest.mark.parametrize(
    ("url", "kind"),
    [("clip.mp4", "video"), ("clip.MP4?t=1", "video"), ("still.png", "image")],
)
def test_media_kind(url: str, kind: str) -> None:
    """Only mp4 files are rendered as video."""
    assert media_kind(url) == kind, f"unexpected kind for {url!r}"
