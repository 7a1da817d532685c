from __future__ import annotations
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional

from .errors import ConfigurationError
from .schema import Schema

# Defaults are looked up by name; agents never fall back to them implicitly.
DEFAULTS: dict[str, Any] = {
    "base_url": "https://api.together.xyz/v1",
    "model": "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
    "review_model": "meta-llama/Llama-3.3-70B-Instruct-Turbo-Free",
    "cost_per_1m_tokens": 0.88,
    "shell": "bash",
    "env_file": ".env",
}

TRUTHY = {"1", "true", "yes", "on"}


class AgentConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    model: str = Field(..., description="Model identifier sent with every request.")
    system_prompt: str = Field(..., description="System message that frames the agent's role.")
    output_schema: Optional[Schema] = Field(..., description="Shape the JSON answer must have.")


class Settings(BaseModel):
    api_key: Optional[str] = Field(None, description="Bearer key for the completion service")
    base_url: str = Field(DEFAULTS["base_url"], description="OpenAI-compatible API base URL")
    model: str = Field(DEFAULTS["model"], description="Model used by the planner and specialist agents")
    review_model: str = Field(DEFAULTS["review_model"], description="Model used by the reviewer and chat")
    cost_per_1m_tokens: float = Field(DEFAULTS["cost_per_1m_tokens"], ge=0)
    shell: str = DEFAULTS["shell"]
    money_is_no_object: bool = False

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        load_dotenv(env_file or DEFAULTS["env_file"])
        return cls(
            api_key=os.getenv("TOGETHER_API_KEY") or None,
            base_url=os.getenv("TOGETHER_BASE_URL", DEFAULTS["base_url"]),
            model=os.getenv("STRUCTAGENT_MODEL", DEFAULTS["model"]),
            review_model=os.getenv("STRUCTAGENT_REVIEW_MODEL", DEFAULTS["review_model"]),
            shell=os.getenv("STRUCTAGENT_SHELL", DEFAULTS["shell"]),
            money_is_no_object=os.getenv("MONEY_IS_NO_OBJECT", "").strip().lower() in TRUTHY,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "TOGETHER_API_KEY not found. Run `structagent setup` or add it to your .env file."
            )
        return self.api_key
