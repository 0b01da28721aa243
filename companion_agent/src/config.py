# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Runtime configuration.

Two layers are used:

- ``Settings``: deployment settings (API key, model names, log level, data
  directory) read from the environment and an optional ``.env`` file.
- ``AppConfig``: the user-editable ``config.json`` holding prompts, agent
  names and descriptions, phases and mood stages. Every field is optional
  and falls back to the built-in defaults.
"""

import json
import logging

from pathlib import Path
from typing import Optional

import pydantic_settings
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_MODEL = "x-ai/grok-4.1-fast"
DEFAULT_MAIN_SYSTEM_PROMPT = "You are the main coordinating agent."


class Settings(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env", extra="ignore"
    )

    OPENROUTER_API_KEY: Optional[str] = None
    API_BASE_URL: str = "https://openrouter.ai/api/v1"

    # Sub-agents and the planner run on MODEL, the user facing root agent on
    # TALK_MODEL.
    MODEL: str = DEFAULT_MODEL
    TALK_MODEL: str = DEFAULT_MODEL

    LOG_LEVEL: str = "INFO"
    DATA_DIR: Path = Path.home() / ".companion_agent"
    CONFIG_FILE: Optional[Path] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, v):
        v_upper = v.upper()
        if v_upper not in logging._nameToLevel:
            raise ValueError(f'invalid value "{v}"')
        return v_upper

    @property
    def config_path(self) -> Path:
        return self.CONFIG_FILE or self.DATA_DIR / "config.json"

    @property
    def store_path(self) -> Path:
        return self.DATA_DIR / "store.sqlite3"


settings = Settings()


class GraduationChallenge(BaseModel):
    title: str
    content: str


class Phase(BaseModel):
    title: str
    user_description: str = ""
    agent_prompt: str = ""
    graduation_challenge: Optional[GraduationChallenge] = None


class AppConfig(BaseModel):
    main_system_prompt: Optional[str] = None
    sysprompts: dict[str, str] = Field(default_factory=dict)
    agent_names: dict[str, str] = Field(default_factory=dict)
    agent_descriptions: dict[str, str] = Field(default_factory=dict)
    phases: list[Phase] = Field(default_factory=list)
    mood_stages: dict[str, str] = Field(default_factory=dict)

    @property
    def main_prompt(self) -> str:
        return self.main_system_prompt or DEFAULT_MAIN_SYSTEM_PROMPT

    def sysprompt(self, key: str, default: str) -> str:
        return self.sysprompts.get(key) or default.strip()

    def agent_name(self, key: str, default: str) -> str:
        return self.agent_names.get(key) or default

    def agent_description(self, key: str, default: str) -> str:
        return self.agent_descriptions.get(key) or default


def load_app_config(path: Optional[Path] = None) -> AppConfig:
    """Load ``config.json``, using defaults if it is missing or invalid."""
    path = path or settings.config_path
    try:
        contents = Path(path).read_text()
        return AppConfig.model_validate(json.loads(contents))
    except FileNotFoundError:
        logger.info(f"No config file at {path}, using defaults")
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Config file {path} unreadable, using defaults: {e}")
    return AppConfig()
