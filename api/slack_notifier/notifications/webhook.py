"""Slack incoming-webhook delivery."""

import logging
from typing import Optional
from urllib.parse import quote_plus

import httpx

from slack_notifier.notifications import DEFAULT_TIMEOUT, DeliveryOutcome
from slack_notifier.notifications.errors import (
    EncodingError,
    ResponseReadError,
    TransportError,
    WebhookConnectionError,
)
from slack_notifier.security import (
    check_webhook_url,
    is_valid_host_label,
    redact_url,
    webhook_http_client,
)

logger = logging.getLogger(__name__)

SLACK_API_URL_SCHEMA = "https://"
SLACK_API_BASE = ".slack.com/"
SLACK_API_WEBHOOK_PATH = "services/hooks/incoming-webhook"

SLACK_OK_RESPONSE = "ok"

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "charset": "utf-8",
}

# Failures while connecting or sending the request body
_SEND_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.WriteError,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.UnsupportedProtocol,
)


def encode_token(token: str) -> str:
    """Percent-encode the token as UTF-8 (spaces become ``+``)."""
    try:
        return quote_plus(token, encoding="utf-8", errors="strict")
    except UnicodeError as exc:
        raise EncodingError(f"URL encoding error: [{exc}].") from exc


def build_webhook_url(team_domain: str, auth_token: str) -> str:
    if not is_valid_host_label(team_domain):
        raise WebhookConnectionError(
            f"Slack API URL is malformed: [invalid team domain '{team_domain}']."
        )
    return (
        f"{SLACK_API_URL_SCHEMA}{team_domain}{SLACK_API_BASE}"
        f"{SLACK_API_WEBHOOK_PATH}?token={encode_token(auth_token)}"
    )


class WebhookClient:
    """
    POSTs a rendered message to Slack and interprets the reply.

    One call opens one client and one response stream; both are closed on
    every exit path. Nothing is retried.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    async def deliver(self, message: str, url: str) -> DeliveryOutcome:
        ok, reason = check_webhook_url(url)
        if not ok:
            raise WebhookConnectionError(f"Slack API URL is malformed: [{reason}].")

        try:
            content = message.encode("utf-8")
        except UnicodeError as exc:
            raise EncodingError(f"Message encoding error: [{exc}].") from exc

        logger.debug("Calling %s", redact_url(url))

        async with webhook_http_client(timeout=self.timeout, transport=self._transport) as client:
            try:
                async with client.stream(
                    "POST", url, headers=REQUEST_HEADERS, content=content
                ) as response:
                    body = await _read_body(response)
                    status_code = response.status_code
            except httpx.InvalidURL as exc:
                raise WebhookConnectionError(
                    f"Slack API URL is malformed: [{exc}]."
                ) from exc
            except _SEND_ERRORS as exc:
                raise WebhookConnectionError(
                    f"Error putting data to Slack URL: [{exc}]."
                ) from exc
            except httpx.TransportError as exc:
                raise TransportError(
                    f"Failed to obtain HTTP response: [{exc}]."
                ) from exc

        logger.debug("Slack responded %s: %s", status_code, body[:200])

        return DeliveryOutcome(
            succeeded=body == SLACK_OK_RESPONSE,
            raw_response=body,
            status_code=status_code,
        )


async def _read_body(response: httpx.Response) -> str:
    """Drain the whole body as UTF-8, whatever the status code."""
    try:
        raw = await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as exc:
        raise ResponseReadError(
            f"Error reading Slack API response: [{exc}]."
        ) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ResponseReadError(
            f"Error reading Slack API response: [{exc}]."
        ) from exc
