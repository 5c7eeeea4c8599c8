"""Outbound URL checks and the HTTP client used for webhook delivery."""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

# A single DNS label: the Slack team domain becomes "<label>.slack.com".
_HOST_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")


def is_valid_host_label(value: str) -> bool:
    return bool(_HOST_LABEL.match(value or ""))


def check_webhook_url(url: str) -> tuple[bool, str]:
    try:
        parsed = urlsplit(url)
    except ValueError:
        return False, "Invalid URL"

    if parsed.scheme not in ("http", "https"):
        return False, f"Scheme '{parsed.scheme}' not allowed. Use https."

    hostname = parsed.hostname
    if not hostname:
        return False, "URL has no hostname"

    if not all(is_valid_host_label(label) for label in hostname.split(".")):
        return False, f"Hostname '{hostname}' is not valid"

    return True, ""


def redact_url(url: str) -> str:
    """Strip the query string so tokens never reach the logs."""
    parsed = urlsplit(url)
    if not parsed.query:
        return url
    return urlunsplit((parsed.scheme, parsed.netloc, parsed.path, "token=***", ""))


def webhook_http_client(
    timeout: float = 10,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=False,
        transport=transport,
        **kwargs,
    )
