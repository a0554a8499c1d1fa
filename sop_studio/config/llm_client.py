from __future__ import annotations

import json
import logging
import re
from threading import Lock
from typing import Any, Dict, List, Optional

import requests
from requests import exceptions as requests_exceptions

from sop_studio.config.settings import DEFAULT_LLM_BASE, DEFAULT_LLM_MODEL, LLMConfig, _coerce_int
from sop_studio.errors import LLMClientError

logger = logging.getLogger(__name__)


def _describe_exception(exc: Exception) -> str:
    if isinstance(exc, requests_exceptions.RequestException):
        response = getattr(exc, "response", None)
        if response is not None:
            try:
                body = response.text
            except Exception:  # pragma: no cover
                body = "<unavailable>"
            snippet = (body or "").strip()
            if len(snippet) > 200:
                snippet = snippet[:200] + "…"
            status = getattr(response, "status_code", "?")
            return f"{exc.__class__.__name__} (status={status}): {snippet or str(exc)}"
    return f"{exc.__class__.__name__}: {exc}"


def _extract_text_from_content(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for item in content:
            if isinstance(item, dict):
                if item.get("type") == "text" and isinstance(item.get("text"), str):
                    parts.append(item["text"])
                elif isinstance(item.get("content"), str):
                    parts.append(item["content"])
        return "\n".join(p for p in parts if p)
    if content is None:
        return ""
    return str(content)


def _normalize_usage(raw_usage: Any) -> Dict[str, int]:
    if not isinstance(raw_usage, dict):
        return {}
    usage: Dict[str, int] = {}
    for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = raw_usage.get(key)
        if isinstance(value, (int, float)):
            usage[key] = int(value)
    if "total_tokens" not in usage and usage:
        usage["total_tokens"] = usage.get("prompt_tokens", 0) + usage.get("completion_tokens", 0)
    return usage


def parse_json_payload(text: str) -> Optional[Any]:
    """Decode a JSON object from model output, tolerating fences and surrounding prose."""
    if not text:
        return None
    stripped = text.strip()
    fence = re.match(r"^```(?:json)?\s*(.*?)\s*```$", stripped, flags=re.DOTALL)
    if fence:
        stripped = fence.group(1).strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", stripped, flags=re.DOTALL)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                return None
    return None


class ChatClient:
    """Minimal client for OpenAI-compatible ``/chat/completions`` endpoints."""

    def __init__(self, config: Dict[str, Any]):
        self.config = dict(config)
        base_url = (self.config.get("base_url") or DEFAULT_LLM_BASE).rstrip("/")
        if base_url.endswith("/chat/completions"):
            self._endpoint = base_url
        elif base_url.endswith("/v1"):
            self._endpoint = f"{base_url}/chat/completions"
        else:
            self._endpoint = f"{base_url}/v1/chat/completions"
        self._model = self.config.get("model") or DEFAULT_LLM_MODEL
        self._timeout = _coerce_int(self.config.get("request_timeout"), 60)
        if self._timeout <= 0:
            self._timeout = 60

        self._headers: Dict[str, str] = {"Content-Type": "application/json"}
        self._headers.update(self.config.get("extra_headers") or {})
        api_key = (self.config.get("api_key") or "").strip()
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

        self._verified = not self.config.get("verify_connection", False)
        self._verify_lock = Lock()
        self._last_usage: Dict[str, int] = {}

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def model(self) -> str:
        return self._model

    @property
    def last_usage(self) -> Dict[str, int]:
        return dict(self._last_usage)

    def _post(self, payload: Dict[str, Any], timeout: int | None = None) -> Dict[str, Any]:
        response = requests.post(
            self._endpoint,
            headers=self._headers,
            json=payload,
            timeout=timeout or self._timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected response format from LLM")
        return data

    @staticmethod
    def _extract_content_from_response(data: Dict[str, Any]) -> str:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValueError("LLM response does not contain choices")
        first_choice = choices[0]
        if not isinstance(first_choice, dict):
            raise ValueError(f"Unexpected choice type: {type(first_choice).__name__}")
        message = first_choice.get("message")
        if isinstance(message, dict):
            return _extract_text_from_content(message.get("content"))
        return _extract_text_from_content(first_choice.get("text"))

    def _verify_connection(self) -> None:
        if self._verified:
            return
        with self._verify_lock:
            if self._verified:
                return
            payload = {
                "model": self._model,
                "messages": [
                    {"role": "system", "content": "Reply with the single word 'pong'."},
                    {"role": "user", "content": "ping"},
                ],
                "temperature": 0.0,
                "max_tokens": 5,
                "stream": False,
            }
            try:
                self._post(payload)
            except Exception as exc:
                reason = _describe_exception(exc)
                raise LLMClientError(
                    f"Failed to reach LLM at {self._endpoint} during connectivity check: {reason}"
                ) from exc
            self._verified = True
            logger.info("LLM endpoint %s verified", self._endpoint)

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: int | None = None,
    ) -> str:
        self._verify_connection()

        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        try:
            data = self._post(payload, timeout=timeout)
            self._last_usage = _normalize_usage(data.get("usage"))
            content = self._extract_content_from_response(data)
        except Exception as exc:
            reason = _describe_exception(exc)
            raise LLMClientError(f"LLM request failed: {reason}") from exc
        logger.debug("LLM usage: %s", self._last_usage or "n/a")
        return content


def build_chat_client(cfg: Dict[str, Any] | None = None) -> ChatClient:
    merged_cfg = {**LLMConfig().to_dict(), **(cfg or {})}
    return ChatClient(merged_cfg)


__all__ = ["ChatClient", "build_chat_client", "parse_json_payload"]
