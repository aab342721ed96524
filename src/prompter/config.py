"""Prompt settings with environment-variable overrides.

Every field has a working default; ``PromptSettings.from_env`` lets a user
tune rendering without code changes:

* ``PROMPTER_DEBOUNCE_MS``  -- redraw coalescing window in milliseconds
* ``PROMPTER_MAX_CHOICES``  -- number of choice lines shown at once
* ``PROMPTER_WRITE_LOG``    -- append every terminal write to this file
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

ENV_DEBOUNCE_MS = "PROMPTER_DEBOUNCE_MS"
ENV_MAX_CHOICES = "PROMPTER_MAX_CHOICES"
ENV_WRITE_LOG = "PROMPTER_WRITE_LOG"


@dataclass
class PromptSettings:
    """Tunables shared by the session controller and the prompt verbs."""

    debounce_ms: int = 10
    max_visible_choices: int = 10
    stdin_timeout: float = 0.01
    write_log_path: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PromptSettings:
        env = os.environ if environ is None else environ
        settings = cls()
        settings.debounce_ms = _read_int(env, ENV_DEBOUNCE_MS, settings.debounce_ms)
        settings.max_visible_choices = _read_int(
            env, ENV_MAX_CHOICES, settings.max_visible_choices
        )
        settings.write_log_path = env.get(ENV_WRITE_LOG, "")
        return settings


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", name, raw)
        return default
    return value
