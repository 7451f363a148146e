"""
Configuration for the provenance engine.

Supports:
- Environment variable configuration
- YAML file configuration
- Runtime overrides
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from realitystamp.intake import DEFAULT_MAX_CONTENT_SIZE, IntakeLimits

DEFAULT_CELL_SIZE = 45
DEFAULT_SURFACE_WIDTH = 450
DEFAULT_SURFACE_HEIGHT = 300
DEFAULT_FINGERPRINT_WIDTH = 16


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _coerce_bool(value: Any) -> bool:
    """YAML booleans pass through; quoted strings are parsed like env values."""
    if isinstance(value, str):
        return _parse_bool(value)
    return bool(value)


def _parse_surface(value: str) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` surface size."""
    try:
        width, height = value.lower().split("x", 1)
        return int(width), int(height)
    except ValueError:
        raise ValueError(f"Surface must look like 450x300, got {value!r}")


@dataclass
class EngineConfig:
    """
    Configuration for signing sessions and the post store.

    Defaults reproduce the demo behaviour:
    - cell_size: 45 (grid pitch for entropy coverage)
    - auto_issue: False (manual signing)
    - tamper_binary_payloads: False (binary tampering is override-only)
    """

    cell_size: int = DEFAULT_CELL_SIZE
    surface_width: int = DEFAULT_SURFACE_WIDTH
    surface_height: int = DEFAULT_SURFACE_HEIGHT
    fingerprint_width: int = DEFAULT_FINGERPRINT_WIDTH

    # Issue as soon as coverage reaches 100% and content is present
    auto_issue: bool = False

    # Rename binary payloads on simulated tamper so the fingerprint diverges too
    tamper_binary_payloads: bool = False

    limits: IntakeLimits = field(default_factory=IntakeLimits)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be >= 1, got {self.cell_size}")
        if self.surface_width < 1 or self.surface_height < 1:
            raise ValueError(
                f"surface must be at least 1x1, got {self.surface_width}x{self.surface_height}"
            )
        if self.fingerprint_width < 1:
            raise ValueError(f"fingerprint_width must be >= 1, got {self.fingerprint_width}")

    @classmethod
    def from_env(cls) -> EngineConfig:
        """
        Create configuration from environment variables.

        Environment variables:
            REALITYSTAMP_CELL_SIZE: Grid pitch in pixels
            REALITYSTAMP_SURFACE: Surface size, e.g. 450x300
            REALITYSTAMP_AUTO_ISSUE: Sign automatically at full entropy (true/false)
            REALITYSTAMP_MAX_CONTENT_SIZE: Upload size ceiling in bytes
            REALITYSTAMP_TAMPER_BINARY: Rename binary payloads on tamper (true/false)
        """
        width, height = _parse_surface(
            os.getenv("REALITYSTAMP_SURFACE", f"{DEFAULT_SURFACE_WIDTH}x{DEFAULT_SURFACE_HEIGHT}")
        )
        return cls(
            cell_size=int(os.getenv("REALITYSTAMP_CELL_SIZE", str(DEFAULT_CELL_SIZE))),
            surface_width=width,
            surface_height=height,
            auto_issue=_parse_bool(os.getenv("REALITYSTAMP_AUTO_ISSUE", "false")),
            tamper_binary_payloads=_parse_bool(os.getenv("REALITYSTAMP_TAMPER_BINARY", "false")),
            limits=IntakeLimits(
                max_content_size=int(
                    os.getenv("REALITYSTAMP_MAX_CONTENT_SIZE", str(DEFAULT_MAX_CONTENT_SIZE))
                ),
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create configuration from dictionary (e.g., YAML)."""
        surface = data.get("surface") or {}
        limits_data = data.get("limits") or {}

        return cls(
            cell_size=int(data.get("cell_size", DEFAULT_CELL_SIZE)),
            surface_width=int(surface.get("width", DEFAULT_SURFACE_WIDTH)),
            surface_height=int(surface.get("height", DEFAULT_SURFACE_HEIGHT)),
            fingerprint_width=int(data.get("fingerprint_width", DEFAULT_FINGERPRINT_WIDTH)),
            auto_issue=_coerce_bool(data.get("auto_issue", False)),
            tamper_binary_payloads=_coerce_bool(data.get("tamper_binary_payloads", False)),
            limits=IntakeLimits.from_dict(limits_data) if limits_data else IntakeLimits(),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> EngineConfig:
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration format in {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "cell_size": self.cell_size,
            "surface": {
                "width": self.surface_width,
                "height": self.surface_height,
            },
            "fingerprint_width": self.fingerprint_width,
            "auto_issue": self.auto_issue,
            "tamper_binary_payloads": self.tamper_binary_payloads,
            "limits": self.limits.to_dict(),
        }

    def write_yaml(self, path: Path) -> None:
        """Write configuration to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=True)
