"""Receiver for job notifications raised by the orchestration host."""

import logging

from fastapi import APIRouter, Depends, Request

from slack_notifier.auth import require_api_key
from slack_notifier.notifications.adapter import SlackNotifier
from slack_notifier.response import single_response
from slack_notifier.schemas.notification import NotificationIn, NotificationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notifier(request: Request) -> SlackNotifier:
    return request.app.state.notifier


@router.post("/{trigger}", summary="Send a job notification to Slack")
async def post_notification(
    trigger: str,
    body: NotificationIn,
    notifier: SlackNotifier = Depends(get_notifier),
    _key=Depends(require_api_key),
):
    # NotificationError propagates to the app-level handler
    delivered = await notifier.notify(trigger, body.execution_data, body.config)
    result = NotificationResult(
        delivered=delivered,
        trigger=trigger,
        channel=notifier.config.channel,
    )
    return single_response(result.model_dump())
