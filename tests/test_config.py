"""
Tests for TOML configuration loading.
"""

import pytest

from shared.config import WifiLensConfig


class TestDefaults:
    """Test built-in defaults."""

    def test_component_defaults(self):
        config = WifiLensConfig()

        assert config.extractor.unescape_qr_fields is True
        assert config.extractor.script_hints[0] == "latin"
        assert config.catalog.drop_unsecured is True
        assert "<hidden>" in config.catalog.hidden_placeholders
        assert config.matcher.threshold == 60.0
        assert config.resolver.auto_select is True
        assert config.resolver.collaborator_timeout == 30.0
        assert config.global_settings.log_level == "WARNING"

    def test_to_dict(self):
        data = WifiLensConfig().to_dict()

        assert data["matcher"] == {"threshold": 60.0}
        assert set(data) == {"global_settings", "extractor", "catalog", "matcher", "resolver"}


class TestLoad:
    """Test loading from TOML files."""

    def test_load_sections(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[global]\n"
            'log_level = "DEBUG"\n'
            "\n"
            "[extractor]\n"
            'script_hints = ["latin", "korean"]\n'
            "\n"
            "[catalog]\n"
            "drop_unsecured = false\n"
            "\n"
            "[matcher]\n"
            "threshold = 75.5\n"
            "\n"
            "[resolver]\n"
            "auto_select = false\n"
            "collaborator_timeout = 5\n",
            encoding="utf-8",
        )

        config = WifiLensConfig.load(path)

        assert config.global_settings.log_level == "DEBUG"
        assert config.extractor.script_hints == ["latin", "korean"]
        assert config.extractor.unescape_qr_fields is True
        assert config.catalog.drop_unsecured is False
        assert config.matcher.threshold == 75.5
        assert config.resolver.auto_select is False
        assert config.resolver.collaborator_timeout == 5

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[matcher]\nthreshold = 70.0\nalgorithm = \"jaro\"\n\n[extra]\nx = 1\n")

        assert WifiLensConfig.load(path).matcher.threshold == 70.0

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WifiLensConfig.load(tmp_path / "absent.toml")
