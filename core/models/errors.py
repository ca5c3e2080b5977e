# =============================================================================
# core/models/errors.py - Normalized Error Envelope
# =============================================================================
# Every failure that leaves the API is converted into a NormalizedError
# before it is serialized. The wire shape is:
#
#   {"error": "<message>", "code": "<MACHINE_CODE>", "details": {...}}
#
# with the HTTP status taken from status_code. "details" is omitted when
# there is nothing safe to add.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class NormalizedError(BaseModel):
    """
    A failure ready to be returned to the caller.

    status_code is always an HTTP 4xx/5xx status; the model refuses
    anything else so a success status can never carry an error body.

    Example:
        NormalizedError(
            message="URL too long",
            code="URL_TOO_LONG",
            status_code=414,
        ).to_envelope()
        # {"error": "URL too long", "code": "URL_TOO_LONG"}
    """

    message: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, pattern=r"^[A-Z0-9_]+$")
    status_code: int = Field(..., ge=400, le=599)
    details: dict[str, Any] | list[Any] | None = None

    model_config = {"frozen": True}

    def to_envelope(self) -> dict[str, Any]:
        """Convert to the JSON body sent to clients."""
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details is not None:
            body["details"] = self.details
        return body
