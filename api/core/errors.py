"""
Error taxonomy shared by the upstream client, the converter and the store.

Each error carries the HTTP status it maps to. `main.py` registers a single
handler that renders them as `{"error": ..., "details": ...}`.
"""

from __future__ import annotations


class ComplaintsError(RuntimeError):
    status_code = 500

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body: dict = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ComplaintsError):
    """Bad user input (offset, limit, dates)."""

    status_code = 400


class FetchError(ComplaintsError):
    """Upstream API unreachable, failing, or returning an unreadable body."""


class ConversionError(ComplaintsError):
    """Delimited-text payload could not be turned into complaint records."""


class MalformedRowError(ConversionError):
    pass


class InsertError(ComplaintsError):
    """The document store rejected a batch write."""


class StartupError(ComplaintsError):
    pass
