from functools import lru_cache

from pydantic_settings import BaseSettings

from slack_notifier.notifications import DEFAULT_CHANNEL, DEFAULT_TIMEOUT, PluginConfig


class Settings(BaseSettings):
    app_name: str = "Slack Job Notifier"
    debug: bool = False
    log_level: str = "INFO"

    # Shared secret the orchestration host sends as X-API-Key (empty = open)
    api_key: str = ""

    # Slack destination
    slack_team_domain: str = ""
    slack_auth_token: str = ""
    slack_channel: str = DEFAULT_CHANNEL

    # Directory with custom message templates (empty = packaged templates)
    slack_template_dir: str = ""

    # Outbound webhook timeout (seconds)
    request_timeout: float = DEFAULT_TIMEOUT

    model_config = {"env_file": ".env", "extra": "ignore"}

    def plugin_config(self) -> PluginConfig:
        return PluginConfig(
            auth_token=self.slack_auth_token,
            team_domain=self.slack_team_domain,
            channel=self.slack_channel or DEFAULT_CHANNEL,
            timeout=self.request_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
