r"""Parse calibration instructions into navigable sections and steps.

This package turns the instruction phrases shown during on-screen
calibration procedures into a structured model, whichever of the two
authoring grammars (legacy ``[[TT]]``/``[[SS]]``/``[[LL]]`` tokens or
Markdown) they use, and computes the sliding window the stepper shows while
the participant steps through them.

Exports
-------
- ``parse_instructions``: Detect the grammar and parse a phrase.
- ``compute_window``: Lines the stepper shows at a given position.
- ``InstructionModel``/``Section``/``Step``: The parsed model.

Examples
--------
>>> from rc_instructions import compute_window, parse_instructions
>>> model = parse_instructions("# Setup\n1. Find a card\n2. Hold it up")
>>> [entry.text for entry in compute_window(model, 1).entries]
['Setup', '1. Find a card', '2. Hold it up']
"""

from __future__ import annotations

from .adapter import (
    compare_parser_outputs,
    detect_format,
    get_instruction_model,
    is_markdown_phrase,
    measure_parser_performance,
    parse_instructions,
)
from .converter import convert_legacy_to_markdown
from .errors import (
    InstructionConfigError,
    InstructionError,
    InvalidInputError,
    MediaFetchError,
)
from .inline import format_inline
from .legacy_parser import parse_legacy
from .markdown_parser import parse_markdown
from .media import extract_media
from .models import (
    FlatStepRef,
    InstructionFormat,
    InstructionModel,
    Section,
    Step,
    empty_model,
)
from .stepper import compute_window, select_media
from .validator import validate_model

__all__ = [
    "FlatStepRef",
    "InstructionConfigError",
    "InstructionError",
    "InstructionFormat",
    "InstructionModel",
    "InvalidInputError",
    "MediaFetchError",
    "Section",
    "Step",
    "compare_parser_outputs",
    "compute_window",
    "convert_legacy_to_markdown",
    "detect_format",
    "empty_model",
    "extract_media",
    "format_inline",
    "get_instruction_model",
    "is_markdown_phrase",
    "measure_parser_performance",
    "parse_instructions",
    "parse_legacy",
    "parse_markdown",
    "select_media",
    "validate_model",
]
