"""Load instruction configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from rc_instructions.errors import InstructionConfigError

from .helpers import _build_asset_map, _build_defaults, _build_phrases
from .models import InstructionConfig


def load_instruction_config(path: Path) -> InstructionConfig:
    """Load the YAML file describing parser defaults and asset maps.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``instructions.yaml``).

    Returns
    -------
    InstructionConfig
        Parsed configuration with defaults applied for any missing option.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    InstructionConfigError
        If an option has an invalid value or an asset map is not a mapping.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from rc_instructions.config import load_instruction_config
    >>> config = load_instruction_config(Path("instructions.yaml"))  # doctest: +SKIP
    >>> config.parser_options("distance")["spaces_per_level"]  # doctest: +SKIP
    2
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    defaults_raw = raw.get("defaults") or {}
    if not isinstance(defaults_raw, dict):
        msg = "'defaults' must be a mapping."
        raise InstructionConfigError(msg)

    asset_maps_raw = raw.get("asset_maps") or {}
    if not isinstance(asset_maps_raw, dict):
        msg = "'asset_maps' must be a mapping of names to asset maps."
        raise InstructionConfigError(msg)

    return InstructionConfig(
        defaults=_build_defaults(defaults_raw),
        asset_maps={
            str(name): _build_asset_map(str(name), payload)
            for name, payload in asset_maps_raw.items()
        },
        phrases=_build_phrases(raw.get("phrases")),
    )


__all__ = ["load_instruction_config"]
