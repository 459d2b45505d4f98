"""Environment configuration loaded from a local .env file."""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_WEAVIATE_URL = "http://localhost:8080"
DEFAULT_GRPC_PORT = 50051
DEFAULT_GENERATION_MODEL = "gpt-5-mini"
DEFAULT_MAX_TOKENS = 1024

LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}


def parse_weaviate_url(url: str):
    """Parse a database URL; cluster URLs given without a scheme are https."""
    return urlparse(url if "://" in url else f"https://{url}")


def is_local_url(url: str) -> bool:
    return (parse_weaviate_url(url).hostname or "") in LOCAL_HOSTS


@dataclass
class Settings:
    """Connection and provider settings for a session."""

    weaviate_url: str = DEFAULT_WEAVIATE_URL
    weaviate_api_key: Optional[str] = None
    weaviate_grpc_port: int = DEFAULT_GRPC_PORT
    openai_api_key: Optional[str] = None
    cohere_api_key: Optional[str] = None
    generation_model: str = DEFAULT_GENERATION_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    log_level: str = "INFO"

    def is_local(self) -> bool:
        """Check whether the database URL points at this machine."""
        return is_local_url(self.weaviate_url)

    def vectorizer_headers(self) -> Dict[str, str]:
        """Provider keys forwarded to the database's vectorizer modules."""
        headers = {}
        if self.openai_api_key:
            headers["X-OpenAI-Api-Key"] = self.openai_api_key
        if self.cohere_api_key:
            headers["X-Cohere-Api-Key"] = self.cohere_api_key
        return headers


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    Variables from ``env_file`` (or a ``.env`` found from the working
    directory) are loaded first; variables already set in the process
    environment win.

    Args:
        env_file: Optional explicit path to a dotenv file

    Returns:
        Populated Settings instance

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    settings = Settings(
        weaviate_url=os.getenv("WEAVIATE_URL") or DEFAULT_WEAVIATE_URL,
        weaviate_api_key=os.getenv("WEAVIATE_API_KEY") or None,
        weaviate_grpc_port=_get_int("WEAVIATE_GRPC_PORT", DEFAULT_GRPC_PORT),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        cohere_api_key=os.getenv("COHERE_API_KEY") or None,
        generation_model=os.getenv("OPENAI_MODEL") or DEFAULT_GENERATION_MODEL,
        max_tokens=_get_int("OPENAI_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )

    logger.debug(f"Loaded settings for Weaviate at {settings.weaviate_url}")
    return settings
