"""
Error taxonomy for Ashpaz.

Every failure that can end a request derives from AshpazError and carries the
HTTP status and the message shown to the client. Diagnostic details (raw
completions, provider bodies) stay on the exception for logging and are never
sent to the client.
"""

from typing import Any, List, Optional


class AshpazError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    def to_payload(self) -> dict:
        return {"error": self.message}


# --- LLM pipeline -----------------------------------------------------------

class ProviderUnavailable(AshpazError):
    """No provider credential is configured; callers switch to mock mode."""
    status_code = 503
    public_message = "AI provider is not configured"


class ProviderError(AshpazError):
    """The provider answered with a non-success status or could not be reached."""
    status_code = 502
    public_message = "Recipe generation failed"

    def __init__(self, message: Optional[str] = None, provider_status: Optional[int] = None, details: str = ""):
        super().__init__(message)
        self.provider_status = provider_status
        self.details = details

    def to_payload(self) -> dict:
        # The user sees the generic message; the provider status is safe to expose.
        payload = {"error": self.public_message}
        if self.provider_status is not None:
            payload["status"] = self.provider_status
        return payload


class EmptyCompletion(ProviderError):
    """A successful provider response that contained no usable text."""

    def __init__(self, message: str = "Empty response from AI provider"):
        super().__init__(message)


class MalformedResponse(AshpazError):
    """The completion could not be parsed as JSON."""
    status_code = 502
    public_message = "Recipe generation failed: the AI returned an invalid response"

    def __init__(self, raw: str, message: str = "Invalid JSON in AI response"):
        super().__init__(message)
        self.raw = raw

    def to_payload(self) -> dict:
        return {"error": self.public_message}


class SchemaViolation(AshpazError):
    """The completion was valid JSON but did not match the expected shape."""
    status_code = 502
    public_message = "Recipe generation failed: the AI returned an invalid response"

    def __init__(self, raw: str, errors: Optional[List[Any]] = None, message: str = "AI response does not match the recipe schema"):
        super().__init__(message)
        self.raw = raw
        self.errors = errors or []

    def to_payload(self) -> dict:
        return {"error": self.public_message}


class InvalidSuggestionsFormat(SchemaViolation):
    def __init__(self, raw: str, message: str = "Invalid suggestions format"):
        super().__init__(raw, message=message)


# --- Auth / persistence -----------------------------------------------------

class Unauthorized(AshpazError):
    status_code = 401
    public_message = "Authentication required"


class InvalidToken(Unauthorized):
    public_message = "Invalid or expired token"


class Conflict(AshpazError):
    status_code = 409
    public_message = "Resource already exists"


class NotFound(AshpazError):
    status_code = 404
    public_message = "Not found"
