"""Trigger name -> presentation lookup."""

from types import MappingProxyType
from typing import Mapping

from slack_notifier.notifications import PresentationEntry, TriggerKind
from slack_notifier.notifications.errors import UnknownTriggerError

MESSAGE_TEMPLATE = "slack-message.json.j2"

COLOR_GOOD = "good"
COLOR_WARNING = "warning"
COLOR_DANGER = "danger"


class TriggerRegistry:
    """Immutable table with exactly one entry per ``TriggerKind``."""

    def __init__(self, entries: Mapping[TriggerKind, PresentationEntry]):
        missing = [kind.value for kind in TriggerKind if kind not in entries]
        if missing or len(entries) != len(TriggerKind):
            raise ValueError(f"Trigger table must cover every trigger exactly once, missing: {missing}")
        self._entries = MappingProxyType({kind.value: entry for kind, entry in entries.items()})

    @classmethod
    def default(cls) -> "TriggerRegistry":
        return cls({
            TriggerKind.START: PresentationEntry(MESSAGE_TEMPLATE, COLOR_WARNING),
            TriggerKind.SUCCESS: PresentationEntry(MESSAGE_TEMPLATE, COLOR_GOOD),
            TriggerKind.FAILURE: PresentationEntry(MESSAGE_TEMPLATE, COLOR_DANGER),
        })

    def lookup(self, trigger: str) -> PresentationEntry:
        """Return the entry for ``trigger`` (case-sensitive) or raise ``UnknownTriggerError``."""
        key = trigger.value if isinstance(trigger, TriggerKind) else trigger
        try:
            return self._entries[key]
        except (KeyError, TypeError):
            raise UnknownTriggerError(str(trigger)) from None

    def __contains__(self, trigger: object) -> bool:
        key = trigger.value if isinstance(trigger, TriggerKind) else trigger
        return key in self._entries
