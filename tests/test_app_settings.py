from __future__ import annotations

import logging
from pathlib import Path

from utils.app_settings import get_settings


def test_defaults_without_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("PUBLIC_DIR", "UPLOAD_DIR", "LABEL_MAX_COUNT", "PRUNE_EMPTY_KEYWORDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.public_dir == Path("public")
    assert settings.upload_dir == Path("public/uploads")
    assert settings.label_max_count == 10
    assert settings.prune_empty_keywords is True
    assert settings.log_level == "INFO"


def test_non_integer_falls_back_to_default(monkeypatch, tmp_path, caplog) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LABEL_MAX_COUNT", "abc")

    with caplog.at_level(logging.WARNING, logger="utils.app_settings"):
        settings = get_settings()

    assert settings.label_max_count == 10
    assert "Ignoring non-integer LABEL_MAX_COUNT='abc', using 10" in caplog.text


def test_boolean_and_level_parsing(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRUNE_EMPTY_KEYWORDS", "off")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "6")

    settings = get_settings()

    assert settings.prune_empty_keywords is False
    assert settings.log_level == "DEBUG"
    assert settings.password_hash_rounds == 6
