from pathlib import Path

import pytest
from pydantic import ValidationError

from tests.helpers import make_settings


class TestSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, ENV="production")

        assert settings.STORAGE_BACKEND == "local"
        assert settings.MAX_FILE_SIZE_MB == 32
        assert settings.MAX_FILE_SIZE_BYTES == 32 * 1024 * 1024
        assert settings.OPENAI_MODEL == "gpt-3.5-turbo"
        assert settings.SUMMARY_MAX_TOKENS == 150
        assert settings.SUMMARY_TEMPERATURE == 0.3
        assert settings.BACKEND_TIMEOUT_SECONDS == 30.0
        assert not settings.is_development

    def test_values_are_normalized(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, ENV="Development", STORAGE_BACKEND="CLOUD")
        assert settings.is_development
        assert settings.STORAGE_BACKEND == "cloud"

    def test_reads_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "5")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")

        settings = make_settings(tmp_path)

        assert settings.MAX_FILE_SIZE_BYTES == 5 * 1024 * 1024
        assert settings.OPENAI_MODEL == "gpt-4o-mini"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"STORAGE_BACKEND": "s3"},
            {"ENV": "staging"},
            {"MAX_FILE_SIZE_MB": 0},
            {"BACKEND_TIMEOUT_SECONDS": 0},
        ],
    )
    def test_invalid_values_rejected(self, tmp_path: Path, overrides) -> None:
        with pytest.raises(ValidationError):
            make_settings(tmp_path, **overrides)
