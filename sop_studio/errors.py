from __future__ import annotations


class SOPStudioError(Exception):
    """Base class for application errors."""


class NotFoundError(SOPStudioError, LookupError):
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class LLMClientError(SOPStudioError, RuntimeError):
    pass


class GenerationError(SOPStudioError, RuntimeError):
    pass


class ExportError(SOPStudioError, RuntimeError):
    def __init__(self, fmt: str, message: str | None = None):
        self.format = fmt
        super().__init__(message or f"Failed to generate {fmt} document")


__all__ = [
    "SOPStudioError",
    "NotFoundError",
    "LLMClientError",
    "GenerationError",
    "ExportError",
]
