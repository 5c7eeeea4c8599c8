"""Sends job notification messages to a Slack room."""

import logging
from typing import Any, Mapping, Optional

from slack_notifier.notifications import NotificationRequest, PluginConfig
from slack_notifier.notifications.errors import DeliveryRejectedError, MissingConfigError
from slack_notifier.notifications.registry import TriggerRegistry
from slack_notifier.notifications.renderer import MessageRenderer
from slack_notifier.notifications.webhook import WebhookClient, build_webhook_url

logger = logging.getLogger(__name__)


class SlackNotifier:
    """
    Notification adapter for one fixed Slack destination.

    ``notify`` validates the destination, renders the message for the trigger
    and delivers it. Every failure is raised as a ``NotificationError``;
    retries are left to the caller.
    """

    def __init__(
        self,
        config: PluginConfig,
        registry: Optional[TriggerRegistry] = None,
        renderer: Optional[MessageRenderer] = None,
        client: Optional[WebhookClient] = None,
    ):
        self.config = config
        self.registry = registry or TriggerRegistry.default()
        self.renderer = renderer or MessageRenderer(self.registry)
        self.client = client or WebhookClient(timeout=config.timeout)

    async def notify(
        self,
        trigger: str,
        execution_data: Mapping[str, Any],
        config: Mapping[str, Any],
    ) -> bool:
        """
        Send a Slack message for a job notification event.

        Args:
            trigger: Name of the job notification event (start, success, failure)
            execution_data: Job execution data, passed through to the template
            config: Job notification configuration, passed through to the template

        Returns:
            True if Slack answered ``ok``.
        """
        self.registry.lookup(trigger)

        execution_id = execution_data.get("id") if isinstance(execution_data, Mapping) else None
        logger.info("Trigger %s fired for execution %s", trigger, execution_id or "<no id>")

        if not self.config.team_domain:
            raise MissingConfigError("teamDomain")
        if not self.config.auth_token:
            raise MissingConfigError("authToken")

        message = self.renderer.render(trigger, execution_data, config, self.config.channel)
        url = build_webhook_url(self.config.team_domain, self.config.auth_token)
        outcome = await self.client.deliver(message, url)

        if outcome.succeeded:
            logger.info("Slack notification for %s delivered to %s", trigger, self.config.channel)
            return True

        logger.warning(
            "Slack rejected notification for %s (status %s): %s",
            trigger,
            outcome.status_code,
            outcome.raw_response[:200],
        )
        raise DeliveryRejectedError(outcome.raw_response, outcome.status_code)

    async def notify_request(self, request: NotificationRequest) -> bool:
        return await self.notify(request.trigger, request.execution_data, request.config)
