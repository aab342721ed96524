"""Tests for prompter.config.PromptSettings."""

from __future__ import annotations

import logging

from prompter.config import (
    ENV_DEBOUNCE_MS,
    ENV_MAX_CHOICES,
    ENV_WRITE_LOG,
    PromptSettings,
)


class TestFromEnv:
    def test_defaults(self) -> None:
        settings = PromptSettings.from_env({})
        assert settings == PromptSettings()
        assert settings.debounce_ms == 10
        assert settings.max_visible_choices == 10

    def test_overrides(self) -> None:
        settings = PromptSettings.from_env(
            {ENV_DEBOUNCE_MS: "25", ENV_MAX_CHOICES: "4", ENV_WRITE_LOG: "/tmp/out.log"}
        )
        assert settings.debounce_ms == 25
        assert settings.max_visible_choices == 4
        assert settings.write_log_path == "/tmp/out.log"

    def test_reads_process_environment(self, monkeypatch) -> None:
        monkeypatch.setenv(ENV_DEBOUNCE_MS, "0")
        assert PromptSettings.from_env().debounce_ms == 0

    def test_invalid_values_fall_back(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="prompter.config"):
            settings = PromptSettings.from_env({ENV_DEBOUNCE_MS: "soon", ENV_MAX_CHOICES: "-1"})
        assert settings.debounce_ms == 10
        assert settings.max_visible_choices == 10
        assert "not an integer" in caplog.text
        assert "must not be negative" in caplog.text

    def test_empty_value_is_unset(self) -> None:
        assert PromptSettings.from_env({ENV_MAX_CHOICES: ""}).max_visible_choices == 10
