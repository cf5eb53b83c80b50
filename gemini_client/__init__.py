"""
Gemini Completion Client

Schema-constrained JSON completions with shallow response validation.
"""

from .audit import AuditLog, LoggingAuditLog
from .client import (
    CompletionClient,
    CompletionOutcome,
    CompletionRequest,
    FailureKind,
    InlinePart,
    TextPart,
)
from .config import DEFAULT_MODEL, ConfigurationError, resolve_api_key
from .schema import ResponseValidator, SchemaField, SchemaKind, ShallowValidator

__all__ = [
    "AuditLog",
    "LoggingAuditLog",
    "CompletionClient",
    "CompletionOutcome",
    "CompletionRequest",
    "FailureKind",
    "InlinePart",
    "TextPart",
    "DEFAULT_MODEL",
    "ConfigurationError",
    "resolve_api_key",
    "ResponseValidator",
    "SchemaField",
    "SchemaKind",
    "ShallowValidator",
]
