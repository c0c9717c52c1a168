"""Tests for configuration classes."""

import json

import pytest

from chapter_extractor.config import ExtractorConfig
from chapter_splitter.config import ExportConfig
from chapter_splitter.errors import InvalidExportConfig


class TestExtractorConfig:
    """Tests for ExtractorConfig."""

    def test_defaults(self) -> None:
        config = ExtractorConfig()
        assert config.min_chars == 20
        assert config.max_workers == 4

    def test_validation(self) -> None:
        with pytest.raises(ValueError, match="min_chars"):
            ExtractorConfig(min_chars=-1)
        with pytest.raises(ValueError, match="max_workers"):
            ExtractorConfig(max_workers=0)


class TestExportConfig:
    """Tests for ExportConfig."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = ExportConfig()
        assert config.pattern == "Chapter"
        assert config.start_number == 1
        assert config.offset == 0
        assert config.mode == "single"
        assert config.output_format == "txt"
        assert config.selection is None

    def test_blank_pattern_falls_back(self) -> None:
        assert ExportConfig(pattern="   ").pattern == "Chapter"

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"start_number": 0}, "Start Number"),
            ({"offset": -1}, "Offset"),
            ({"skip_last": -2}, "Skip Last"),
            ({"mode": "batch"}, "mode"),
            ({"mode": "grouped", "group_size": 0}, "Chapters per File"),
            ({"output_format": "epub"}, "output_format"),
            ({"font_size": 0}, "font_size"),
        ],
    )
    def test_invalid_values(self, kwargs: dict, message: str) -> None:
        """Test that out-of-range settings are rejected with a clear message."""
        with pytest.raises(InvalidExportConfig, match=message) as exc_info:
            ExportConfig(**kwargs)
        assert exc_info.value.code == "invalid_config"

    def test_group_size_ignored_in_single_mode(self) -> None:
        assert ExportConfig(mode="single", group_size=0).group_size == 0

    def test_invalid_config_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ExportConfig(start_number=-5)

    def test_to_dict(self) -> None:
        """Test converting config to dictionary."""
        config_dict = ExportConfig(pattern="Part", mode="grouped", group_size=3).to_dict()
        assert config_dict["pattern"] == "Part"
        assert config_dict["group_size"] == 3

    def test_from_dict(self) -> None:
        """Test creating config from dictionary."""
        config = ExportConfig.from_dict({"pattern": "Vol", "output_format": "pdf", "selection": [0, 2]})
        assert config.pattern == "Vol"
        assert config.output_format == "pdf"
        assert config.selection == [0, 2]

    def test_from_dict_rejects_unknown_setting(self) -> None:
        with pytest.raises(ValueError, match=r"Unknown ExportConfig setting\(s\): colour"):
            ExportConfig.from_dict({"pattern": "Vol", "colour": "red"})

    def test_json_roundtrip(self, tmp_path) -> None:
        """Test saving and loading from JSON."""
        json_path = tmp_path / "nested" / "export.json"
        original = ExportConfig(pattern="Book", start_number=7, font_size=12)
        original.to_json(json_path)

        assert json.loads(json_path.read_text())["start_number"] == 7
        assert ExportConfig.from_json(json_path) == original

    def test_from_json_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            ExportConfig.from_json(tmp_path / "nope.json")
