"""Alert model as pushed to Keep."""

from typing import Literal, get_args

from pydantic import BaseModel, Field

AlertStatus = Literal["firing", "resolved", "acknowledged", "suppressed", "pending"]
AlertSeverity = Literal["critical", "high", "warning", "info", "low"]

ALERT_STATUSES: tuple[str, ...] = get_args(AlertStatus)
ALERT_SEVERITIES: tuple[str, ...] = get_args(AlertSeverity)

DEFAULT_STATUS: AlertStatus = "firing"
DEFAULT_SEVERITY: AlertSeverity = "critical"


class Alert(BaseModel):
    """Alert event managed as a resource.

    Identified remotely by ``fingerprint``, which Keep generates when unset.
    """

    id: str | None = None
    fingerprint: str | None = None
    name: str
    status: AlertStatus = DEFAULT_STATUS
    severity: AlertSeverity = DEFAULT_SEVERITY
    environment: str | None = None
    service: str | None = None
    source: list[str] = Field(default_factory=list)
    message: str | None = None
    description: str | None = None
    url: str | None = None
    image_url: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    last_received: str | None = None
