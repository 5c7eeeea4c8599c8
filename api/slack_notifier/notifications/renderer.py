"""Message rendering: trigger presentation + execution data -> Slack JSON body."""

import logging
from typing import Any, Mapping, Optional

import jinja2

from slack_notifier.notifications.errors import TemplateLoadError, TemplateRenderError
from slack_notifier.notifications.format_value import format_value
from slack_notifier.notifications.registry import TriggerRegistry

logger = logging.getLogger(__name__)


def build_environment(template_dir: Optional[str] = None) -> jinja2.Environment:
    """
    Create the template environment.

    Templates ship inside the package; ``template_dir`` points at a directory
    on disk instead, for deployments that customise the message layout.
    """
    if template_dir:
        loader: jinja2.BaseLoader = jinja2.FileSystemLoader(template_dir)
    else:
        loader = jinja2.PackageLoader("slack_notifier", "templates")

    env = jinja2.Environment(
        loader=loader,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["display"] = format_value
    env.policies["json.dumps_kwargs"] = {"sort_keys": True, "default": str}
    return env


class MessageRenderer:
    """Merges presentation data, execution data and config into a message."""

    def __init__(
        self,
        registry: TriggerRegistry,
        environment: Optional[jinja2.Environment] = None,
    ):
        self.registry = registry
        self.environment = environment or build_environment()

    def render(
        self,
        trigger: str,
        execution_data: Mapping[str, Any],
        config: Mapping[str, Any],
        channel: str,
    ) -> str:
        entry = self.registry.lookup(trigger)

        context = {
            "trigger": str(getattr(trigger, "value", trigger)),
            "color": entry.color,
            "executionData": execution_data,
            "config": config,
            "channel": channel,
        }

        template = self._load(entry.template_id)
        try:
            return template.render(context)
        except (jinja2.TemplateError, TypeError, ValueError) as exc:
            logger.error("Rendering template %s for %s failed: %s", entry.template_id, context["trigger"], exc)
            raise TemplateRenderError(
                f"Error merging Slack notification message template: [{exc}]."
            ) from exc

    def _load(self, template_id: str) -> jinja2.Template:
        try:
            return self.environment.get_template(template_id)
        except jinja2.TemplateNotFound as exc:
            logger.error("Message template %s not found", template_id)
            raise TemplateLoadError(
                f"Error loading Slack notification message template: [{exc}]."
            ) from exc
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateRenderError(
                f"Error merging Slack notification message template: [{exc}]."
            ) from exc
        except OSError as exc:
            raise TemplateLoadError(
                f"Error loading Slack notification message template: [{exc}]."
            ) from exc
