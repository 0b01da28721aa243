# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json
import pytest

from src.config import AppConfig, Settings, load_app_config


class TestAppConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_app_config(tmp_path / "config.json")

        assert config == AppConfig()
        assert config.main_prompt == "You are the main coordinating agent."

    def test_invalid_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{broken")

        assert load_app_config(path) == AppConfig()

    def test_loads_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "main_system_prompt": "Be a kind coach.",
                    "sysprompts": {"rule_agent": "Rules prompt"},
                    "agent_names": {"rule_agent": "rules"},
                    "phases": [{"title": "Start"}],
                }
            )
        )

        config = load_app_config(path)

        assert config.main_prompt == "Be a kind coach."
        assert config.sysprompt("rule_agent", "default") == "Rules prompt"
        assert config.sysprompt("voice_agent", "\n  default  \n") == "default"
        assert config.agent_name("rule_agent", "rule") == "rules"
        assert config.agent_description("rule_agent", "Manages rules") == "Manages rules"
        assert config.phases[0].title == "Start"

    def test_empty_main_prompt_falls_back(self):
        assert AppConfig(main_system_prompt="").main_prompt == "You are the main coordinating agent."


class TestSettings:
    def test_paths(self, tmp_path):
        settings = Settings(DATA_DIR=tmp_path)

        assert settings.config_path == tmp_path / "config.json"
        assert settings.store_path == tmp_path / "store.sqlite3"

    def test_explicit_config_file(self, tmp_path):
        settings = Settings(DATA_DIR=tmp_path, CONFIG_FILE=tmp_path / "other.json")

        assert settings.config_path == tmp_path / "other.json"

    def test_log_level_validation(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
        with pytest.raises(ValueError):
            Settings(LOG_LEVEL="chatty")
