"""
Logging utility functions and helpers.
"""

import logging
from typing import Any, Dict, Optional

SENSITIVE_FIELDS = {
    'password', 'token', 'secret', 'authorization', 'cookie', 'api_key'
}

REDACTED = "***REDACTED***"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `data` that is safe to log.

    Passwords and secrets are fully redacted. Tokens keep their first
    8 characters so two log lines can still be correlated. Nested
    dictionaries are sanitized recursively.
    """
    sanitized = data.copy()

    for key, value in sanitized.items():
        lowered = str(key).lower()

        if any(sensitive in lowered for sensitive in SENSITIVE_FIELDS):
            if isinstance(value, str) and 'token' in lowered and len(value) > 8:
                sanitized[key] = f"{value[:8]}..."
            else:
                sanitized[key] = REDACTED

        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)

    return sanitized


def log_request(
    logger: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    client_ip: Optional[str] = None,
    user_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
):
    """
    Log an HTTP request in a structured format.

    The level follows the status code: 5xx -> ERROR, 4xx -> WARNING,
    everything else -> INFO.
    """
    log_data = {
        "http_method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }

    if client_ip:
        log_data["client_ip"] = client_ip

    if user_id:
        log_data["user_id"] = user_id

    if extra:
        log_data.update(sanitize_log_data(extra))

    message = f'{client_ip or "unknown"} - "{method} {path}" {status_code}'

    if status_code >= 500:
        logger.error(message, extra=log_data)
    elif status_code >= 400:
        logger.warning(message, extra=log_data)
    else:
        logger.info(message, extra=log_data)
