"""Configuration, prompt templates and the LLM client."""

from .settings import Settings, LLMConfig, configure_logging, get_settings
from .llm_client import ChatClient, build_chat_client, parse_json_payload

__all__ = [
    "Settings",
    "LLMConfig",
    "configure_logging",
    "get_settings",
    "ChatClient",
    "build_chat_client",
    "parse_json_payload",
]
