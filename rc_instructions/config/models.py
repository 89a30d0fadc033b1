"""Typed dataclasses describing instruction parser configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from rc_instructions.adapter import get_instruction_model
from rc_instructions.errors import InstructionConfigError
from rc_instructions.models import InstructionFormat, InstructionModel


@dc.dataclass(slots=True)
class ParserDefaults:
    """Default options applied to every parse."""

    format: InstructionFormat = InstructionFormat.AUTO
    spaces_per_level: int = 2
    strict_mode: bool = False
    validate: bool = False
    stepper_history: int = 1
    language: str = "en"


@dc.dataclass(slots=True)
class InstructionConfig:
    """Parser defaults, named asset maps and an optional phrase table."""

    defaults: ParserDefaults = dc.field(default_factory=ParserDefaults)
    asset_maps: dict[str, dict[str, str]] = dc.field(default_factory=dict)
    phrases: dict[str, dict[str, str]] = dc.field(default_factory=dict)

    def get_asset_map(self, name: str) -> dict[str, str]:
        """Return the asset map registered under ``name``."""
        try:
            return self.asset_maps[name]
        except KeyError as exc:
            available = ", ".join(sorted(self.asset_maps)) or "none"
            msg = f"Unknown asset map '{name}'. Known asset maps: {available}"
            raise KeyError(msg) from exc

    def parser_options(
        self, asset_map: str | typ.Mapping[str, str] | None = None
    ) -> dict[str, typ.Any]:
        """Return keyword arguments for :func:`parse_instructions`.

        ``asset_map`` may name a configured map or be a mapping itself.
        """
        resolved: typ.Mapping[str, str] | None
        if isinstance(asset_map, str):
            resolved = self.get_asset_map(asset_map)
        else:
            resolved = asset_map
        return {
            "format": self.defaults.format,
            "asset_map": dict(resolved or {}),
            "spaces_per_level": self.defaults.spaces_per_level,
            "strict_mode": self.defaults.strict_mode,
            "validate": self.defaults.validate,
        }

    def phrase_options(
        self, asset_map: str | typ.Mapping[str, str] | None = None
    ) -> dict[str, typ.Any]:
        """Return keyword arguments for :func:`get_instruction_model`.

        These are the :meth:`parser_options` plus the configured fallback
        language. An ``auto`` default format is left out so ``_MD`` phrase
        keys still select Markdown.
        """
        options = self.parser_options(asset_map)
        if options["format"] is InstructionFormat.AUTO:
            del options["format"]
        options["fallback_language"] = self.defaults.language
        return options

    def window_options(self) -> dict[str, typ.Any]:
        """Return keyword arguments for :func:`compute_window`."""
        return {"history_depth": self.defaults.stepper_history}

    def instruction_model(
        self,
        phrase_key: str,
        language: str,
        asset_map: str | typ.Mapping[str, str] | None = None,
    ) -> InstructionModel:
        """Parse ``phrase_key`` from the configured phrase table."""
        return get_instruction_model(
            self.phrases, phrase_key, language, **self.phrase_options(asset_map)
        )


__all__ = ["InstructionConfig", "InstructionConfigError", "ParserDefaults"]
