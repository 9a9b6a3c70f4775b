from typing import Any, Dict, Optional
from fastapi import Request

MASK = "***MASKED***"

SECRET_KEY_TERMS = ("password", "secret", "token", "authorization", "cookie", "api_key", "apikey")


def mask_email(value: str) -> str:
    """Keep the first three characters of the local part and the domain."""
    local, sep, domain = value.partition("@")
    if not sep or len(local) <= 3:
        return MASK
    return f"{local[:3]}***@{domain}"


def mask_sensitive_data(data: Any) -> Any:
    """
    Recursively mask sensitive values in dictionaries and lists.

    Keys naming passwords, secrets, tokens or cookies are replaced entirely;
    email addresses are partially masked. Request IDs are kept for tracing.
    """
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if key_lower in ("requestid", "request_id"):
                masked[key] = value
            elif any(term in key_lower for term in SECRET_KEY_TERMS):
                masked[key] = MASK
            elif key_lower == "email" and isinstance(value, str):
                masked[key] = mask_email(value)
            else:
                masked[key] = mask_sensitive_data(value)
        return masked

    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    if isinstance(data, str) and data.startswith("eyJ") and data.count(".") == 2:
        # Looks like a JWT
        return MASK

    return data


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Mask sensitive HTTP headers."""
    return {
        key: MASK if any(term in key.lower() for term in SECRET_KEY_TERMS) else value
        for key, value in headers.items()
    }


def get_request_id(request: Optional[Request]) -> Optional[str]:
    """Request ID assigned by LoggingMiddleware, if any."""
    if request is not None:
        return getattr(request.state, "request_id", None)
    return None


def sanitize_log_message(message: str, **kwargs: Any) -> str:
    """
    Build a log line of the form ``message | Key: value | ... | RequestID: <id>``.

    Context values are masked with mask_sensitive_data(); the RequestID is
    moved to the end so RequestIDFormatter can lift it into its own column.
    """
    request_id = kwargs.pop('RequestID', None) or kwargs.pop('request_id', None)

    parts = [message]
    for key, value in mask_sensitive_data(kwargs).items():
        if isinstance(value, (dict, list)):
            value = str(value)[:200]
        parts.append(f"{key}: {value}")

    if request_id:
        parts.append(f"RequestID: {request_id}")

    return " | ".join(parts)
