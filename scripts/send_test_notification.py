#!/usr/bin/env python3
"""
Send a single test notification to the configured Slack room.

Reads SLACK_TEAM_DOMAIN, SLACK_AUTH_TOKEN and SLACK_CHANNEL from the
environment (or .env), renders the message for the given trigger and posts it.

Usage:
    python scripts/send_test_notification.py success --job nightly-backup --project ops
"""

import argparse
import asyncio
import logging
import sys

from slack_notifier.config import get_settings
from slack_notifier.main import build_notifier
from slack_notifier.notifications import NotificationRequest, TriggerKind
from slack_notifier.notifications.errors import NotificationError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("trigger", choices=[kind.value for kind in TriggerKind])
    parser.add_argument("--job", default="test-job", help="Job name shown in the message")
    parser.add_argument("--project", default="test-project", help="Project shown in the message")
    parser.add_argument("--user", default="admin", help="User that started the job")
    parser.add_argument("--channel", default=None, help="Override the configured channel")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = get_settings()
    if args.channel:
        settings = settings.model_copy(update={"slack_channel": args.channel})

    notifier = build_notifier(settings)
    request = NotificationRequest(
        trigger=args.trigger,
        execution_data={
            "id": 1,
            "user": args.user,
            "project": args.project,
            "status": {"start": "running", "success": "succeeded", "failure": "failed"}[args.trigger],
            "job": {"name": args.job, "project": args.project},
        },
    )

    try:
        asyncio.run(notifier.notify_request(request))
    except NotificationError as e:
        print(f"ERROR [{e.kind.value}]: {e.message}", file=sys.stderr)
        return 1

    print(f"Notification delivered to {notifier.config.channel}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
