"""Tests for engine configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from realitystamp.config import EngineConfig


class TestEngineConfig:
    """Test configuration sources."""

    def test_defaults(self):
        """Test defaults match the demo canvas."""
        config = EngineConfig()

        assert config.cell_size == 45
        assert config.fingerprint_width == 16
        assert not config.auto_issue
        assert config.limits.max_content_size == 10 * 1024 * 1024

    @pytest.mark.parametrize("kwargs", [
        {"cell_size": 0},
        {"surface_width": 0},
        {"surface_height": -5},
        {"fingerprint_width": 0},
    ])
    def test_validation(self, kwargs):
        """Test invalid values are rejected."""
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("REALITYSTAMP_CELL_SIZE", "30")
        monkeypatch.setenv("REALITYSTAMP_SURFACE", "300x120")
        monkeypatch.setenv("REALITYSTAMP_AUTO_ISSUE", "true")
        monkeypatch.setenv("REALITYSTAMP_MAX_CONTENT_SIZE", "1024")

        config = EngineConfig.from_env()

        assert config.cell_size == 30
        assert (config.surface_width, config.surface_height) == (300, 120)
        assert config.auto_issue
        assert config.limits.max_content_size == 1024

    def test_bad_surface_env(self, monkeypatch):
        """Test malformed surface sizes fail loudly."""
        monkeypatch.setenv("REALITYSTAMP_SURFACE", "wide")

        with pytest.raises(ValueError):
            EngineConfig.from_env()

    def test_yaml_roundtrip(self, tmp_path: Path):
        """Test writing and reading YAML."""
        config = EngineConfig(cell_size=20, surface_width=200, tamper_binary_payloads=True)
        path = tmp_path / "config.yaml"

        config.write_yaml(path)
        loaded = EngineConfig.from_yaml(path)

        assert loaded.to_dict() == config.to_dict()

    def test_partial_yaml(self, tmp_path: Path):
        """Test missing keys fall back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("auto_issue: true\nlimits:\n  max_content_size: 2048\n")

        config = EngineConfig.from_yaml(path)

        assert config.auto_issue
        assert config.cell_size == 45
        assert config.limits.max_content_size == 2048
        assert "image/png" in config.limits.image_formats

    @pytest.mark.parametrize("value, expected", [
        ("false", False),
        ("no", False),
        ("true", True),
        (True, True),
        (0, False),
    ])
    def test_yaml_flag_values(self, value, expected):
        """Test quoted flags are parsed like environment values."""
        config = EngineConfig.from_dict({"auto_issue": value, "tamper_binary_payloads": value})

        assert config.auto_issue is expected
        assert config.tamper_binary_payloads is expected

    def test_null_sections_use_defaults(self, tmp_path: Path):
        """Test empty surface and limits sections fall back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("surface:\nlimits:\n")

        config = EngineConfig.from_yaml(path)

        assert config.surface_width == 450
        assert config.surface_height == 300
        assert config.limits.max_content_size == 10 * 1024 * 1024

    def test_invalid_yaml_shape(self, tmp_path: Path):
        """Test non-mapping YAML is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            EngineConfig.from_yaml(path)
