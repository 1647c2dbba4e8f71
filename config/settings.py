from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

WORKSPACE_PLACEHOLDER = "<workspace-id>"


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.workspace_id: Optional[str] = os.getenv("WORKSPACE_ID")

        self.conversation_url: str = os.getenv(
            "CONVERSATION_URL", "https://gateway.watsonplatform.net/conversation/api"
        )
        self.conversation_username: Optional[str] = os.getenv("CONVERSATION_USERNAME")
        self.conversation_password: Optional[str] = os.getenv("CONVERSATION_PASSWORD")
        self.conversation_version_date: str = os.getenv(
            "CONVERSATION_VERSION_DATE", "2017-02-03"
        )

        self.nlu_url: str = os.getenv(
            "NATURAL_LANGUAGE_UNDERSTANDING_URL",
            "https://gateway.watsonplatform.net/natural-language-understanding/api",
        )
        self.nlu_username: Optional[str] = os.getenv(
            "NATURAL_LANGUAGE_UNDERSTANDING_USERNAME"
        )
        self.nlu_password: Optional[str] = os.getenv(
            "NATURAL_LANGUAGE_UNDERSTANDING_PASSWORD"
        )
        self.nlu_version_date: str = os.getenv(
            "NATURAL_LANGUAGE_UNDERSTANDING_VERSION_DATE", "2017-02-27"
        )

        self.http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))
        self.context_key_prefix: str = os.getenv("CONTEXT_KEY_PREFIX", "analysis_")
        self.static_dir: str = os.getenv("STATIC_DIR", "./public")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
