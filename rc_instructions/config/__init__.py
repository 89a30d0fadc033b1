"""Load and validate instruction parser configuration YAML.

This subpackage reads an ``instructions.yaml`` file holding parser defaults,
named legacy asset maps and an optional phrase table, and produces the typed
dataclasses (:class:`InstructionConfig`, :class:`ParserDefaults`) that callers
feed into :func:`rc_instructions.parse_instructions`. The primary entry point
is :func:`load_instruction_config`.

Examples
--------
>>> from pathlib import Path
>>> from rc_instructions.config import load_instruction_config
>>> config = load_instruction_config(Path("instructions.yaml"))  # doctest: +SKIP
>>> config.get_asset_map("distance")["LL1"]  # doctest: +SKIP
'https://example.invalid/Instruction%201.mp4'
"""

from .loader import load_instruction_config
from .models import InstructionConfig, InstructionConfigError, ParserDefaults

__all__ = [
    "InstructionConfig",
    "InstructionConfigError",
    "ParserDefaults",
    "load_instruction_config",
]
