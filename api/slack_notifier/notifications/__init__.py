"""Base types for the Slack job notification adapter."""

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

DEFAULT_CHANNEL = "#general"
DEFAULT_TIMEOUT = 10.0

# Host property names (camelCase) -> PluginConfig field names
_PROPERTY_ALIASES = {
    "teamDomain": "team_domain",
    "team_domain": "team_domain",
    "authToken": "auth_token",
    "apiAuthToken": "auth_token",
    "auth_token": "auth_token",
    "channel": "channel",
    "room": "channel",
    "timeout": "timeout",
}


class TriggerKind(str, enum.Enum):
    """Job lifecycle events the host can raise."""
    START = "start"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PresentationEntry:
    """How a trigger is presented in Slack."""
    template_id: str
    color: str  # good | warning | danger


@dataclass(frozen=True)
class PluginConfig:
    """Destination settings, fixed for the lifetime of one notifier."""
    auth_token: str = field(default="", repr=False)
    team_domain: str = ""
    channel: str = DEFAULT_CHANNEL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "PluginConfig":
        """
        Build a config from host plugin properties.

        Accepts ``teamDomain``, ``authToken`` / ``apiAuthToken`` and
        ``channel`` / ``room`` as well as the snake_case field names.
        Unknown keys are ignored.
        """
        values: dict[str, Any] = {}
        for key, value in properties.items():
            name = _PROPERTY_ALIASES.get(key)
            if name is None or value is None:
                continue
            values[name] = float(value) if name == "timeout" else str(value)
        if not values.get("channel"):
            values.pop("channel", None)
        return cls(**values)


@dataclass
class NotificationRequest:
    """One notification as handed over by the host."""
    trigger: str
    execution_data: Mapping[str, Any] = field(default_factory=dict)
    config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryOutcome:
    """Interpreted result of a single webhook POST."""
    succeeded: bool
    raw_response: str
    status_code: Optional[int] = None
