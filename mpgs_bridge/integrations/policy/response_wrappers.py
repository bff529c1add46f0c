from __future__ import annotations

from typing import Any, Dict, Optional


_ABSENT = object()


def extract_path(data: Any, *path: str, default: Any = None) -> Any:
    """Walk nested dicts; any missing key or non-dict hop yields ``default``."""
    current = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def _field(data: Any, *path: str) -> Any:
    return extract_path(data, *path, default=_ABSENT)


def extract_redirect_html(data: Any) -> Optional[str]:
    """Challenge HTML from authentication.redirect.html, else authentication.redirectHtml."""
    for path in (("authentication", "redirect", "html"), ("authentication", "redirectHtml")):
        html = extract_path(data, *path)
        if html:
            return html
    return None


def normalize_initiate_response(data: Any, *, step: int) -> Dict[str, Any]:
    return _envelope(
        data,
        step,
        authenticationStatus=_field(data, "authentication", "status"),
        gatewayRecommendation=_field(data, "response", "gatewayRecommendation"),
    )


def normalize_authenticate_payer_response(data: Any, *, step: int) -> Dict[str, Any]:
    return _envelope(
        data,
        step,
        authenticationStatus=_field(data, "authentication", "status"),
        redirectHtml=extract_redirect_html(data),
        gatewayRecommendation=_field(data, "response", "gatewayRecommendation"),
    )


def normalize_order_response(data: Any, *, step: int) -> Dict[str, Any]:
    return _envelope(
        data,
        step,
        orderStatus=_field(data, "status"),
        totalAuthorizedAmount=_field(data, "totalAuthorizedAmount"),
        totalCapturedAmount=_field(data, "totalCapturedAmount"),
    )


def normalize_payment_response(data: Any, *, step: int) -> Dict[str, Any]:
    return _envelope(
        data,
        step,
        result=_field(data, "result"),
        gatewayCode=_field(data, "response", "gatewayCode"),
        authenticationStatus=_field(data, "authentication", "status"),
    )


def _envelope(data: Any, step: int, **fields: Any) -> Dict[str, Any]:
    # absent upstream fields are dropped; explicit nulls are relayed
    extracted = {k: v for k, v in fields.items() if v is not _ABSENT}
    return {"success": True, "step": step, "data": data, **extracted}
