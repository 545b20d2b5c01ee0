"""Tests for configuration loading and runtime settings."""

import pytest

from gazette_watch.collectors.base import SourceConfig
from gazette_watch.config import ConfigLoader, Settings, load_sources, primary_source
from gazette_watch.config.loader import substitute_env_vars


class TestSubstituteEnvVars:
    """Tests for substitute_env_vars function."""

    def test_set_variable(self, monkeypatch):
        monkeypatch.setenv("DOE_URL", "https://example.com/doe")
        assert substitute_env_vars("url: ${DOE_URL}") == "url: https://example.com/doe"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("DOE_URL", raising=False)
        assert substitute_env_vars("${DOE_URL:-https://fallback}") == "https://fallback"

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("DOE_URL", "")
        assert substitute_env_vars("${DOE_URL:-x}") == "x"

    def test_missing_variable(self, monkeypatch):
        monkeypatch.delenv("DOE_URL", raising=False)
        assert substitute_env_vars("a${DOE_URL}b") == "ab"


class TestConfigLoader:
    """Tests for sources.yml loading."""

    def test_packaged_sources(self, monkeypatch):
        """Test the packaged file loads DOE/PB as primary source."""
        monkeypatch.delenv("DOE_PB_LISTING_URL", raising=False)
        monkeypatch.delenv("DEJT_TRT13_URL", raising=False)

        sources = ConfigLoader().load_sources()

        assert [s.source_id for s in sources] == ["DOE/PB"]
        assert sources[0].listing_url == "https://auniao.pb.gov.br/doe"
        assert sources[0].primary is True
        assert all(isinstance(s, SourceConfig) for s in sources)

    def test_fixed_url_source_enabled_by_env(self, monkeypatch):
        monkeypatch.setenv("DEJT_TRT13_URL", "https://dejt.example.com/caderno.pdf")

        sources = ConfigLoader().load_sources()

        dejt = next(s for s in sources if s.source_id == "DEJT TRT-13")
        assert dejt.collector == "fixed_url"
        assert dejt.document_url == "https://dejt.example.com/caderno.pdf"

    def test_invalid_entries_skipped(self, tmp_path):
        (tmp_path / "sources.yml").write_text(
            """
sources:
  - collector: listing
  - source_id: "Bad"
    collector: ftp
  - source_id: "Regex"
    listing_url: https://x
    link_pattern: "(unclosed"
  - source_id: "Off"
    collector: fixed_url
    document_url: https://x/a.pdf
    enabled: false
  - source_id: "Ok"
    collector: fixed_url
    document_url: https://x/b.pdf
""",
            encoding="utf-8",
        )

        sources = load_sources(str(tmp_path / "sources.yml"))

        assert [s.source_id for s in sources] == ["Ok"]
        assert sources[0].primary is True

    def test_default_timezone(self, tmp_path):
        """Test sources without a timezone take the configured default."""
        (tmp_path / "sources.yml").write_text(
            """
sources:
  - source_id: "A"
    collector: fixed_url
    document_url: https://x/a.pdf
  - source_id: "B"
    collector: fixed_url
    document_url: https://x/b.pdf
    timezone: America/Sao_Paulo
""",
            encoding="utf-8",
        )

        sources = load_sources(str(tmp_path / "sources.yml"), default_timezone="America/Recife")

        assert [s.timezone for s in sources] == ["America/Recife", "America/Sao_Paulo"]

    def test_packaged_sources_use_default_timezone(self, monkeypatch):
        monkeypatch.delenv("DEJT_TRT13_URL", raising=False)
        sources = ConfigLoader(default_timezone="America/Recife").load_sources()
        assert sources[0].timezone == "America/Recife"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(str(tmp_path)).load_sources()

    def test_primary_source(self):
        sources = [SourceConfig(source_id="A"), SourceConfig(source_id="B", primary=True)]
        assert primary_source(sources) == "B"
        assert primary_source([]) == ""


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.terms == []
        assert settings.send_empty is False
        assert settings.history_cap == 300
        assert settings.smtp.configured is False
        assert settings.telegram.configured is False

    def test_full_environment(self):
        settings = Settings.from_env({
            "TERMS": "Prefeitura, kaline,,prefeitura",
            "SEND_EMPTY": "true",
            "HISTORY_CAP": "50",
            "SMTP_HOST": "smtp.example.com",
            "SMTP_PORT": "465",
            "SMTP_USER": "bot",
            "SMTP_PASS": "secret",
            "MAIL_TO": "equipe@example.com",
            "TG_BOT_TOKEN": "123:ABC",
            "TG_CHAT_ID": "-100",
        })

        assert settings.terms == ["prefeitura", "kaline"]
        assert settings.send_empty is True
        assert settings.history_cap == 50
        assert settings.smtp.port == 465
        assert settings.smtp.configured is True
        assert settings.smtp.default_to == "equipe@example.com"
        assert settings.telegram.configured is True

    def test_timezone(self):
        assert Settings.from_env({}).timezone == "America/Fortaleza"
        assert Settings.from_env({"TIMEZONE": "America/Recife"}).timezone == "America/Recife"

    @pytest.mark.parametrize("value", ["0", "false", "", "no"])
    def test_send_empty_off(self, value):
        assert Settings.from_env({"SEND_EMPTY": value}).send_empty is False
