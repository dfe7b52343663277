"""Error kinds raised by the pipeline, the repositories and the share-link service.

Every error carries a short ``kind`` string and the HTTP status the API layer
answers with, so route handlers never translate errors themselves.
"""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    kind = "service_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind}


class NotFound(ServiceError):
    kind = "not_found"
    status_code = 404


class InvalidState(ServiceError):
    kind = "invalid_state"
    status_code = 409


class MissingAsset(ServiceError):
    kind = "missing_asset"
    status_code = 422


class ProviderError(ServiceError):
    """Upstream API answered with a non-success status or could not be reached."""

    kind = "provider_error"
    status_code = 502

    def __init__(self, provider: str, status: Optional[int], body: str) -> None:
        if status is None:
            message = f"{provider} request failed: {body}"
        else:
            message = f"{provider} error: {status} {body}"
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.body = body


class MalformedResponse(ServiceError):
    kind = "malformed_response"
    status_code = 502


class EmptyTranscript(ServiceError):
    kind = "empty_transcript"
    status_code = 422


class PersistenceError(ServiceError):
    kind = "persistence_error"
    status_code = 500


class LinkExpired(ServiceError):
    kind = "link_expired"
    status_code = 410
