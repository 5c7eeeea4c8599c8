import httpx
import pytest

from slack_notifier.notifications import PluginConfig
from slack_notifier.notifications.adapter import SlackNotifier
from slack_notifier.notifications.webhook import WebhookClient

EXECUTION_DATA = {
    "id": 42,
    "href": "https://rundeck.example.com/project/ops/execution/show/42",
    "status": "succeeded",
    "user": "alice",
    "project": "ops",
    "job": {
        "name": "nightly-backup",
        "group": "db",
        "project": "ops",
    },
}


class RecordingTransport(httpx.MockTransport):
    """Mock transport that answers with a fixed reply and records requests."""

    def __init__(self, status_code: int = 200, body: str = "ok"):
        self.requests: list[httpx.Request] = []
        self.closed = 0

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, text=body)

        super().__init__(handler)

    async def aclose(self) -> None:
        self.closed += 1


@pytest.fixture
def execution_data():
    return dict(EXECUTION_DATA)


@pytest.fixture
def plugin_config():
    return PluginConfig(auth_token="abc def", team_domain="acme", channel="#ops")


@pytest.fixture
def make_notifier(plugin_config):
    def _make(transport: httpx.AsyncBaseTransport, config: PluginConfig = None) -> SlackNotifier:
        return SlackNotifier(
            config or plugin_config,
            client=WebhookClient(timeout=5, transport=transport),
        )

    return _make
