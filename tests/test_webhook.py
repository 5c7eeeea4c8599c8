import httpx
import pytest
import respx

from conftest import RecordingTransport
from slack_notifier.notifications import DeliveryOutcome
from slack_notifier.notifications.errors import (
    EncodingError,
    ResponseReadError,
    TransportError,
    WebhookConnectionError,
)
from slack_notifier.notifications.webhook import (
    WebhookClient,
    build_webhook_url,
    encode_token,
)
from slack_notifier.security import redact_url

WEBHOOK_URL = "https://acme.slack.com/services/hooks/incoming-webhook?token=abc+def"
WEBHOOK_PREFIX = "https://acme.slack.com/services/hooks/incoming-webhook"


class ClosableStream(httpx.AsyncByteStream):
    """Response body that fails halfway and counts aclose() calls."""

    def __init__(self):
        self.close_calls = 0

    async def __aiter__(self):
        yield b"o"
        raise httpx.ReadError("connection reset by peer")

    async def aclose(self) -> None:
        self.close_calls += 1


class TestWebhookUrl:
    def test_url_embeds_team_domain_and_encoded_token(self):
        url = build_webhook_url("acme", "abc def")

        assert url == WEBHOOK_URL
        assert "https://acme.slack.com/" in url

    def test_token_is_utf8_percent_encoded(self):
        assert encode_token("a/b&c=d") == "a%2Fb%26c%3Dd"
        assert encode_token("pässwort") == "p%C3%A4sswort"

    @pytest.mark.parametrize("team_domain", ["evil.com/x?", "ac me", "-acme"])
    def test_team_domain_must_be_a_single_label(self, team_domain):
        with pytest.raises(WebhookConnectionError):
            build_webhook_url(team_domain, "abc")

    def test_unencodable_token_raises(self):
        with pytest.raises(EncodingError):
            encode_token("bad\udc80token")

    def test_redact_url_hides_token(self):
        assert "abc" not in redact_url(WEBHOOK_URL)


def test_outcome_without_status_has_none():
    outcome = DeliveryOutcome(succeeded=False, raw_response="")

    assert outcome.status_code is None


class TestDeliver:
    @pytest.mark.asyncio
    @respx.mock
    async def test_ok_response_succeeds(self):
        route = respx.post(url__startswith=WEBHOOK_PREFIX).mock(
            return_value=httpx.Response(200, text="ok")
        )

        outcome = await WebhookClient().deliver('{"text": "hi"}', WEBHOOK_URL)

        assert outcome.succeeded is True
        assert outcome.raw_response == "ok"
        assert outcome.status_code == 200
        request = route.calls.last.request
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["charset"] == "utf-8"
        assert request.url.params["token"] == "abc def"
        assert request.content == b'{"text": "hi"}'

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_body_is_not_success(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(
            return_value=httpx.Response(200, text="invalid_token")
        )

        outcome = await WebhookClient().deliver("{}", WEBHOOK_URL)

        assert outcome.succeeded is False
        assert outcome.raw_response == "invalid_token"

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_body_is_still_read(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(
            return_value=httpx.Response(500, text="server error")
        )

        outcome = await WebhookClient().deliver("{}", WEBHOOK_URL)

        assert outcome.succeeded is False
        assert outcome.raw_response == "server error"
        assert outcome.status_code == 500

    @pytest.mark.asyncio
    @respx.mock
    async def test_ok_with_whitespace_is_not_success(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(
            return_value=httpx.Response(200, text="ok\n")
        )

        outcome = await WebhookClient().deliver("{}", WEBHOOK_URL)

        assert outcome.succeeded is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_failure_raises_connection_error(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(side_effect=httpx.ConnectError)

        with pytest.raises(WebhookConnectionError):
            await WebhookClient().deliver("{}", WEBHOOK_URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_status_line_raises_transport_error(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(side_effect=httpx.RemoteProtocolError)

        with pytest.raises(TransportError):
            await WebhookClient().deliver("{}", WEBHOOK_URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_read_timeout_raises_transport_error(self):
        respx.post(url__startswith=WEBHOOK_PREFIX).mock(side_effect=httpx.ReadTimeout)

        with pytest.raises(TransportError):
            await WebhookClient().deliver("{}", WEBHOOK_URL)

    @pytest.mark.asyncio
    async def test_undecodable_body_raises_read_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"\xff\xfe"))

        with pytest.raises(ResponseReadError):
            await WebhookClient(transport=transport).deliver("{}", WEBHOOK_URL)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url",
        [
            "ftp://acme.slack.com/services/hooks/incoming-webhook",
            "https:///services/hooks/incoming-webhook",
            "https://ac me.slack.com/services/hooks/incoming-webhook",
        ],
    )
    async def test_malformed_url_raises_before_any_request(self, url):
        transport = RecordingTransport()

        with pytest.raises(WebhookConnectionError):
            await WebhookClient(transport=transport).deliver("{}", url)

        assert transport.requests == []


class TestResourceRelease:
    @pytest.mark.asyncio
    async def test_stream_released_once_when_body_read_fails(self):
        stream = ClosableStream()
        transport = httpx.MockTransport(lambda request: httpx.Response(200, stream=stream))

        with pytest.raises(ResponseReadError):
            await WebhookClient(transport=transport).deliver("{}", WEBHOOK_URL)

        assert stream.close_calls == 1

    @pytest.mark.asyncio
    async def test_client_released_once_when_write_fails(self):
        def handler(request):
            raise httpx.WriteError("broken pipe", request=request)

        class FailingTransport(RecordingTransport):
            def __init__(self):
                super().__init__()
                self.handler = handler

        transport = FailingTransport()

        with pytest.raises(WebhookConnectionError):
            await WebhookClient(transport=transport).deliver("{}", WEBHOOK_URL)

        assert transport.closed == 1

    @pytest.mark.asyncio
    async def test_client_released_once_after_success(self):
        transport = RecordingTransport(body="ok")

        outcome = await WebhookClient(transport=transport).deliver("{}", WEBHOOK_URL)

        assert outcome.succeeded is True
        assert len(transport.requests) == 1
        assert transport.closed == 1
