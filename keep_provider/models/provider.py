"""Provider model - an installed Keep integration."""

from pydantic import BaseModel, Field


class Provider(BaseModel):
    """Keep provider (integration endpoint).

    ``type`` cannot change after creation; changing it replaces the provider.
    Valid ``config`` keys depend on the type and are not checked locally.
    """

    id: str | None = None
    name: str = Field(min_length=1)
    type: str = Field(min_length=1, description="e.g. 'datadog', 'pagerduty'.")
    config: dict[str, str] = Field(default_factory=dict)
    installed: bool = False
    last_alert_received: str | None = None
