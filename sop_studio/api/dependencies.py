from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from sqlalchemy.orm import Session

from sop_studio.config.llm_client import ChatClient, build_chat_client
from sop_studio.storage.database import current_session_factory


def get_session() -> Iterator[Session]:
    """One session per request; routes commit their own writes."""
    session = current_session_factory()()
    try:
        yield session
    finally:
        session.close()


@lru_cache(maxsize=1)
def get_llm_client() -> ChatClient:
    return build_chat_client()


__all__ = ["get_session", "get_llm_client"]
