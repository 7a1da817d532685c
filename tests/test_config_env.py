"""Tests for settings loading, the .env setup helper and the CLI wiring."""

import pytest

import cli
from structagent.config import DEFAULTS, Settings
from structagent.env import ensure_api_key, has_api_key
from structagent.errors import ConfigurationError

ENV_VARS = (
    "TOGETHER_API_KEY",
    "TOGETHER_BASE_URL",
    "STRUCTAGENT_MODEL",
    "STRUCTAGENT_REVIEW_MODEL",
    "STRUCTAGENT_SHELL",
    "MONEY_IS_NO_OBJECT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        # recorded so values loaded from .env are undone too
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_settings_from_env(clean_env, monkeypatch):
    (clean_env / ".env").write_text("TOGETHER_API_KEY=abc\nMONEY_IS_NO_OBJECT=true\n")
    monkeypatch.setenv("STRUCTAGENT_MODEL", "my-model")
    settings = Settings.from_env()
    assert settings.api_key == "abc"
    assert settings.money_is_no_object is True
    assert settings.model == "my-model"
    assert settings.base_url == DEFAULTS["base_url"]
    assert settings.require_api_key() == "abc"


def test_missing_api_key(clean_env):
    settings = Settings.from_env()
    assert settings.money_is_no_object is False
    with pytest.raises(ConfigurationError):
        settings.require_api_key()


@pytest.mark.asyncio
async def test_ensure_api_key_keeps_other_entries(clean_env):
    env_file = clean_env / ".env"
    env_file.write_text("OTHER=1\n")
    prompts = []

    async def ask(prompt):
        prompts.append(prompt)
        return "  secret  " if len(prompts) > 1 else ""

    assert await ensure_api_key(ask, env_file) is True
    assert len(prompts) == 2
    text = env_file.read_text()
    assert "OTHER=1" in text
    assert "TOGETHER_API_KEY=secret" in text
    assert has_api_key(env_file)


@pytest.mark.asyncio
async def test_ensure_api_key_noop_when_set(clean_env):
    env_file = clean_env / ".env"
    env_file.write_text("TOGETHER_API_KEY=abc\n")

    async def ask(prompt):
        raise AssertionError("should not ask")

    assert await ensure_api_key(ask, env_file) is False


def test_cli_without_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "structagent" in capsys.readouterr().out


def test_cli_reports_missing_key(clean_env, capsys):
    assert cli.main(["chat"]) == 1
    assert "TOGETHER_API_KEY not found" in capsys.readouterr().out
