"""
Errors raised by the TextWave client.

Only two kinds are raised here. Transport failures from ``requests`` and
JSON decode errors reach the caller untouched.
"""

from typing import Any, Optional


DEFAULT_ERROR_MESSAGE = "API request failed"


class ConfigurationError(ValueError):
    """Missing API key or unusable client configuration"""


class TextWaveError(Exception):
    """Non-2xx response from the TextWave API"""

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None,
                 status: Optional[int] = None):
        self.message = message or DEFAULT_ERROR_MESSAGE
        self.code = code
        self.status = status
        super().__init__(self.message)

    @classmethod
    def from_response(cls, status: int, body: Any) -> "TextWaveError":
        """Build an error from an HTTP status and the decoded error body"""
        if not isinstance(body, dict):
            return cls(status=status)
        return cls(message=body.get("message"), code=body.get("code"), status=status)

    def __repr__(self):
        return f"TextWaveError(status={self.status!r}, code={self.code!r}, message={self.message!r})"
