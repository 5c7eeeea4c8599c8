"""
Error taxonomy for the notification adapter.

Every failure raised out of ``SlackNotifier.notify`` is a ``NotificationError``
carrying a ``kind`` tag, so callers can branch on ``err.kind`` without caring
about the concrete class.
"""

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    UNKNOWN_TRIGGER = "unknown_trigger"
    MISSING_CONFIG = "missing_config"
    TEMPLATE_LOAD = "template_load"
    TEMPLATE_RENDER = "template_render"
    ENCODING = "encoding"
    CONNECTION = "connection"
    TRANSPORT = "transport"
    RESPONSE_READ = "response_read"
    DELIVERY_REJECTED = "delivery_rejected"


class NotificationError(Exception):
    """Base class for every adapter failure."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownTriggerError(NotificationError):
    kind = ErrorKind.UNKNOWN_TRIGGER

    def __init__(self, trigger: str):
        super().__init__(f"Unknown trigger type: [{trigger}].")
        self.trigger = trigger


class MissingConfigError(NotificationError):
    kind = ErrorKind.MISSING_CONFIG

    def __init__(self, setting: str):
        super().__init__(f"Slack {setting} is missing from the notifier configuration")
        self.setting = setting


class TemplateLoadError(NotificationError):
    kind = ErrorKind.TEMPLATE_LOAD


class TemplateRenderError(NotificationError):
    kind = ErrorKind.TEMPLATE_RENDER


class EncodingError(NotificationError):
    kind = ErrorKind.ENCODING


class WebhookConnectionError(NotificationError):
    """The URL is malformed, or the request could not be sent."""
    kind = ErrorKind.CONNECTION


class TransportError(NotificationError):
    """The connection broke before a status line was received."""
    kind = ErrorKind.TRANSPORT


class ResponseReadError(NotificationError):
    kind = ErrorKind.RESPONSE_READ


class DeliveryRejectedError(NotificationError):
    """Slack answered, but not with ``ok``."""
    kind = ErrorKind.DELIVERY_REJECTED

    def __init__(self, raw_response: str, status_code: Optional[int] = None):
        super().__init__(f"Unknown status returned from Slack API: [{raw_response}].")
        self.raw_response = raw_response
        self.status_code = status_code
