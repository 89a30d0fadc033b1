"""Unit tests for the instruction model dataclasses."""

from __future__ import annotations

from rc_instructions.models import (
    FlatStepRef,
    InstructionModel,
    Section,
    Step,
    empty_model,
)


def test_flat_steps_follow_section_then_step_order() -> None:
    """The flat order is derived from the sections on every access."""
    first = Section(index="0", steps=[Step("1", "a"), Step("2", "b")])
    second = Section(index="1", steps=[Step(None, "c")])
    model = InstructionModel(sections=(first, second, Section(index="2")))
    assert model.flat_steps == (
        FlatStepRef(0, 0),
        FlatStepRef(0, 1),
        FlatStepRef(1, 0),
    ), f"unexpected flat steps {model.flat_steps!r}"
    assert model.step_at(FlatStepRef(1, 0)).text == "c", "step_at should index in"


def test_empty_model_has_one_untitled_section() -> None:
    """The canonical empty model has a single empty section ``"0"``."""
    model = empty_model()
    assert [section.index for section in model.sections] == ["0"], "one section"
    assert model.flat_steps == (), "no steps to navigate"
    assert model.to_dict() == {
        "sections": [
            {"index": "0", "title": "", "steps": [], "mediaKeys": [], "mediaUrls": []}
        ],
        "flatSteps": [],
    }, "unexpected empty model mapping"


def test_step_mapping_only_lists_set_tags() -> None:
    """Block tags appear only when set; task state accompanies task items."""
    task = Step(None, "Done", is_task=True)
    assert task.to_dict() == {
        "number": None,
        "text": "Done",
        "level": 0,
        "isTask": True,
        "taskChecked": False,
    }, f"unexpected task mapping {task.to_dict()!r}"
    step = Step("1", "a")
    step.attach_media(["a.mp4"], ["LL1"])
    assert step.to_dict()["mediaUrls"] == ["a.mp4"], "media should be listed"
    assert Step.from_dict(step.to_dict()) == step, "mapping should rebuild the step"
