"""
Application exceptions.

Every domain error carries an error code and the HTTP status it maps to.
They are raised by services and converted to JSON responses by the
handlers in ridegroups.api.exception_handlers.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Accounts
    DUPLICATE_ACCOUNT = "DUPLICATE_ACCOUNT"
    MISSING_EMAIL = "MISSING_EMAIL"

    # Providers
    UPSTREAM_AUTH_ERROR = "UPSTREAM_AUTH_ERROR"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    NOT_CONNECTED = "NOT_CONNECTED"

    # Groups
    ALREADY_MEMBER = "ALREADY_MEMBER"


class RideGroupsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Provider errors (502)
# ============================================================================

class ProviderError(RideGroupsError):
    """An outbound call to Strava or Google failed."""

    def __init__(
        self,
        message: str,
        provider: str,
        code: ErrorCode = ErrorCode.UPSTREAM_AUTH_ERROR,
    ) -> None:
        super().__init__(message=message, code=code, status_code=502)
        self.provider = provider


class UpstreamAuthError(ProviderError):
    """
    The provider rejected a token, profile or activity call (non-2xx).

    status_text is the provider's reason phrase ("Unauthorized", ...).
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        status_text: str = "",
    ) -> None:
        super().__init__(message=message, provider=provider)
        self.upstream_status = status_code
        self.status_text = status_text


class ProviderUnavailableError(ProviderError):
    """Network failure or timeout talking to the provider."""

    def __init__(self, message: str, provider: str) -> None:
        super().__init__(
            message=message,
            provider=provider,
            code=ErrorCode.PROVIDER_UNAVAILABLE,
        )


# ============================================================================
# Request errors (400)
# ============================================================================

class NotConnectedError(RideGroupsError):
    """Activity sync attempted without a linked Strava account."""

    def __init__(self, message: str = "Strava not connected") -> None:
        super().__init__(message=message, code=ErrorCode.NOT_CONNECTED, status_code=400)


class DuplicateAccountError(RideGroupsError):
    """Signup collided with an existing email or username."""

    def __init__(self, message: str = "Account already exists") -> None:
        super().__init__(message=message, code=ErrorCode.DUPLICATE_ACCOUNT, status_code=400)


class MissingEmailError(RideGroupsError):
    """Identity provider profile carried no email address."""

    def __init__(self, message: str = "Provider profile has no email address") -> None:
        super().__init__(message=message, code=ErrorCode.MISSING_EMAIL, status_code=400)


class AlreadyMemberError(RideGroupsError):
    """User is already a member of the group."""

    def __init__(self, message: str = "Already a member of this group") -> None:
        super().__init__(message=message, code=ErrorCode.ALREADY_MEMBER, status_code=400)


# ============================================================================
# Access errors
# ============================================================================

class NotAuthenticatedError(RideGroupsError):
    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message=message, code=ErrorCode.UNAUTHORIZED, status_code=401)


class ForbiddenError(RideGroupsError):
    def __init__(self, message: str = "Not allowed") -> None:
        super().__init__(message=message, code=ErrorCode.FORBIDDEN, status_code=403)


class NotFoundError(RideGroupsError):
    """Requested entity does not exist."""

    def __init__(self, resource: str, resource_id: Optional[str] = None) -> None:
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(
            message=f"{resource} not found",
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=details,
        )
