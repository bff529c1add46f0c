import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union


DEFAULT_TIMEOUT_MS = 30_000


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GatewayCredentials:
    merchant_id: str
    username: str
    password: str
    api_base_url: Optional[str] = None
    api_version: Optional[str] = None

    @property
    def auth_token(self) -> str:
        return build_auth_token(self.username, self.password)


def build_auth_token(username: str, password: str) -> str:
    """Return the base64 token used in an ``Authorization: Basic`` header."""
    raw = f"{username}:{password}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


# ---------------------------------------------------------------------------
# Forwarding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ForwardRequest:
    method: str
    url: str
    auth_token: str
    body: Any = None                     # opaque JSON document, never inspected
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self.auth_token}",
            "Accept": "application/json",
        }

    def __repr__(self) -> str:
        # keeps the credential digest out of logs and tracebacks
        return f"ForwardRequest(method={self.method!r}, url={self.url!r}, timeout_ms={self.timeout_ms})"


@dataclass(frozen=True)
class ForwardSuccess:
    status: int
    body: Any


@dataclass(frozen=True)
class ForwardUpstreamError:
    status: int
    body: Any


@dataclass(frozen=True)
class ForwardNetworkError:
    message: str = "No response from MPGS API"


@dataclass(frozen=True)
class ForwardRequestError:
    message: str


ForwardResult = Union[ForwardSuccess, ForwardUpstreamError, ForwardNetworkError, ForwardRequestError]


class GatewayForwarder(ABC):
    """Performs one authenticated upstream call and classifies the outcome."""

    @abstractmethod
    async def forward(self, request: ForwardRequest) -> ForwardResult:
        ...
