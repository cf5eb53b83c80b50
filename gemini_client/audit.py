"""
Audit logging for completion calls.

The completion client reports every request, raw response and failure to an
injected AuditLog. LoggingAuditLog forwards those events to the standard
logging module.
"""

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class AuditLog:
    """Receiver of completion audit events. Subclasses override what they need."""

    def record_request(self, model: str, parts: List[Dict[str, Any]]) -> None:
        pass

    def record_response(self, model: str, raw_text: str) -> None:
        pass

    def record_failure(self, model: str, kind: str, detail: str) -> None:
        pass


class LoggingAuditLog(AuditLog):
    """Writes audit events to a logger (defaults to this module's logger)."""

    def __init__(self, audit_logger: logging.Logger = None):
        self.logger = audit_logger or logger

    def record_request(self, model: str, parts: List[Dict[str, Any]]) -> None:
        self.logger.info("--- AI PROMPT AUDIT ---")
        self.logger.info(f"Model: {model}")
        self.logger.info(f"Contents: {parts}")

    def record_response(self, model: str, raw_text: str) -> None:
        self.logger.info("--- AI RESPONSE AUDIT ---")
        self.logger.info(f"Model: {model}")
        self.logger.info(raw_text)

    def record_failure(self, model: str, kind: str, detail: str) -> None:
        if kind == "configuration":
            self.logger.error(f"AI service misconfigured ({model}): {detail}")
        else:
            self.logger.warning(f"AI completion failed [{kind}] ({model}): {detail}")
