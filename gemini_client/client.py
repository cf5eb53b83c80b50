"""
Schema-Constrained Completion Client

Single chokepoint for every Gemini call made by the sportsbook features.
Sends one request asking for JSON shaped by a SchemaField, parses the text
that comes back and checks the required top-level keys.

Failures of any kind (missing API key, transport error, unparseable text,
missing keys) are logged with their FailureKind and collapse to None.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from google import genai
from google.genai import types
from google.genai.types import GenerateContentConfig, HttpOptions

from .audit import AuditLog, LoggingAuditLog
from .config import GEMINI_TIMEOUT_MS, ConfigurationError, resolve_api_key
from .schema import ResponseValidator, SchemaField, ShallowValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextPart:
    """Plain text content part."""
    text: str


@dataclass(frozen=True)
class InlinePart:
    """Inline binary content part (e.g. an uploaded ID image)."""
    data: bytes
    mime_type: str


ContentPart = Union[TextPart, InlinePart]
ContentInput = Union[str, ContentPart, Sequence[Union[str, ContentPart]]]


def normalize_content(content: ContentInput) -> Tuple[ContentPart, ...]:
    """Turn a string, a part or a sequence of either into a tuple of parts."""
    if isinstance(content, (str, TextPart, InlinePart)):
        content = [content]
    parts = tuple(TextPart(item) if isinstance(item, str) else item for item in content)
    for part in parts:
        if not isinstance(part, (TextPart, InlinePart)):
            raise TypeError(f"Unsupported content part: {type(part).__name__}")
    return parts


@dataclass(frozen=True)
class CompletionRequest:
    """Immutable description of one completion call."""
    model: str
    parts: Tuple[ContentPart, ...]
    schema: SchemaField

    def __post_init__(self):
        if not self.model or not self.model.strip():
            raise ValueError("model must be a non-empty identifier")
        if not self.parts:
            raise ValueError("content must contain at least one part")

    def to_contents(self) -> List[types.Content]:
        """Build the google-genai contents for this request."""
        parts = []
        for part in self.parts:
            if isinstance(part, InlinePart):
                parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
            else:
                parts.append(types.Part.from_text(text=part.text))
        return [types.Content(role="user", parts=parts)]

    def to_config(self) -> GenerateContentConfig:
        return GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=self.schema.to_response_schema(),
        )

    def audit_parts(self) -> List[Dict[str, Any]]:
        """Loggable view of the content; inline payloads are summarized, not dumped."""
        summary = []
        for part in self.parts:
            if isinstance(part, InlinePart):
                summary.append({"inline_data": {"mime_type": part.mime_type, "bytes": len(part.data)}})
            else:
                summary.append({"text": part.text})
        return summary


class FailureKind(str, Enum):
    """Why a completion produced no result."""
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    PARSE = "parse"
    VALIDATION = "validation"


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of one completion: a parsed value, or the failure that prevented it."""
    value: Optional[Dict[str, Any]] = None
    failure: Optional[FailureKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None


def default_client_factory(api_key: str) -> genai.Client:
    """Create a Gemini Developer API client for a single call."""
    http_options = HttpOptions(timeout=GEMINI_TIMEOUT_MS)
    return genai.Client(api_key=api_key, http_options=http_options)


class CompletionClient:
    """
    Sends schema-constrained completion requests to Gemini.

    Holds no per-call state, so one instance can serve any number of
    concurrent callers. A fresh google-genai client is created for every call
    from the API key resolved at that moment.
    """

    def __init__(
        self,
        client_factory: Callable[[str], Any] = None,
        audit_log: AuditLog = None,
        validator: ResponseValidator = None,
        api_key_resolver: Callable[[], str] = resolve_api_key,
    ):
        """
        Initialize the completion client.

        Args:
            client_factory: Builds a genai.Client-like object from an API key
            audit_log: Receiver of request/response/failure audit events
            validator: Response validator (shallow required-key check by default)
            api_key_resolver: Returns the API key or raises ConfigurationError
        """
        self.client_factory = client_factory or default_client_factory
        self.audit_log = audit_log or LoggingAuditLog()
        self.validator = validator or ShallowValidator()
        self.api_key_resolver = api_key_resolver

    async def complete(
        self,
        model: str,
        content: ContentInput,
        schema: SchemaField,
    ) -> Optional[Dict[str, Any]]:
        """
        Run one completion and return the parsed JSON object, or None on any failure.

        Args:
            model: Gemini model identifier
            content: Prompt text and/or inline parts
            schema: Expected output shape, including the required top-level keys

        Returns:
            The parsed response mapping unchanged, or None
        """
        outcome = await self.complete_outcome(model, content, schema)
        return outcome.value

    async def complete_outcome(
        self,
        model: str,
        content: ContentInput,
        schema: SchemaField,
    ) -> CompletionOutcome:
        """Like `complete`, but reports which stage failed."""
        request = CompletionRequest(model=model, parts=normalize_content(content), schema=schema)
        self._audit("record_request", request.model, request.audit_parts())

        try:
            api_key = self.api_key_resolver()
        except ConfigurationError as e:
            return self._fail(request, FailureKind.CONFIGURATION, str(e))

        try:
            raw_text = await asyncio.to_thread(self._send, api_key, request)
        except Exception as e:
            return self._fail(request, FailureKind.TRANSPORT, f"{type(e).__name__}: {e}")

        self._audit("record_response", request.model, raw_text if raw_text is not None else "<empty>")

        json_text = (raw_text or "").strip()
        if not json_text:
            return self._fail(request, FailureKind.PARSE, "empty response text")
        try:
            data = json.loads(json_text)
        except (ValueError, RecursionError) as e:
            return self._fail(request, FailureKind.PARSE, f"invalid JSON: {type(e).__name__}: {e}")

        try:
            errors = self.validator.errors(data, request.schema)
        except Exception as e:
            return self._fail(request, FailureKind.VALIDATION, f"validator raised {type(e).__name__}: {e}")
        if errors:
            return self._fail(request, FailureKind.VALIDATION, "; ".join(errors))

        return CompletionOutcome(value=data)

    def _send(self, api_key: str, request: CompletionRequest) -> Optional[str]:
        client = self.client_factory(api_key)
        response = client.models.generate_content(
            model=request.model,
            contents=request.to_contents(),
            config=request.to_config(),
        )
        return response.text

    def _fail(self, request: CompletionRequest, kind: FailureKind, detail: str) -> CompletionOutcome:
        self._audit("record_failure", request.model, kind.value, detail)
        return CompletionOutcome(failure=kind, detail=detail)

    def _audit(self, method: str, *args) -> None:
        try:
            getattr(self.audit_log, method)(*args)
        except Exception as e:
            logger.warning(f"Audit log {method} failed: {e}")
