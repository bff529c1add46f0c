"""Error taxonomy and catch-all handling for the 3DS bridge."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ThreeDSFlowError(Exception):
    """Base failure of a flow operation, rendered as the JSON failure envelope."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, details: Any = None, *, step: Optional[int] = None, status_code: Optional[int] = None) -> None:
        super().__init__(f"{self.error}: {details}" if details is not None else self.error)
        self.details = details
        self.step = step
        if status_code is not None:
            self.status_code = status_code

    def to_envelope(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"success": False}
        if self.step is not None:
            envelope["step"] = self.step
        envelope["error"] = self.error
        envelope["details"] = self.details
        return envelope


class MissingCredentialsError(ThreeDSFlowError):
    status_code = 400
    error = "Missing required credentials"

    def __init__(self, *, step: Optional[int] = None) -> None:
        super().__init__("merchantId, username, and password are required", step=step)


class MissingBodyError(ThreeDSFlowError):
    status_code = 400
    error = "Request body is required"

    def __init__(self, *, step: Optional[int] = None) -> None:
        super().__init__("requestBody must contain the JSON payload to forward", step=step)


class UpstreamGatewayError(ThreeDSFlowError):
    """The gateway answered with a non-2xx status; status and body are relayed untouched."""

    error = "MPGS API Error"

    def __init__(self, status: int, body: Any, *, step: Optional[int] = None) -> None:
        super().__init__(body, step=step, status_code=status)
        self.status = status

    def to_envelope(self) -> Dict[str, Any]:
        envelope = super().to_envelope()
        envelope["status"] = self.status
        return envelope


class GatewayNetworkError(ThreeDSFlowError):
    error = "Network Error"

    def __init__(self, *, step: Optional[int] = None) -> None:
        super().__init__("No response from MPGS API", step=step)


class GatewayRequestError(ThreeDSFlowError):
    error = "Request Error"

    def __init__(self, message: str, *, step: Optional[int] = None) -> None:
        super().__init__(message, step=step)


class ConfigValidationError(ThreeDSFlowError):
    status_code = 400
    error = "Validation Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in 3DS bridge: %s (context=%s)", exc, context or {}, exc_info=True)
        return {
            "success": False,
            "error": "Internal Server Error",
            "details": str(exc),
        }
