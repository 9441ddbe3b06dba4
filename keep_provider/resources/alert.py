"""Alert resource.

Alerts are addressed by fingerprint, not id. Keep only lets a few
attributes of an existing alert change (through the enrich endpoint), so
every other configurable attribute forces a replacement.
"""

import json
from datetime import datetime, timezone
from typing import Any

from keep_provider.decoding import as_choice, as_id, as_str, as_str_list, as_str_map, as_text
from keep_provider.errors import APIError, DecodeError, NotFoundError, ResourceValidationError
from keep_provider.models.alert import ALERT_SEVERITIES, ALERT_STATUSES, Alert
from keep_provider.resources.base import BaseResource

ALERTS_PATH = "/alerts"
EVENT_PATH = "/alerts/event"
ENRICH_PATH = "/alerts/enrich"

_FIELDS = {
    "id": as_id,
    "fingerprint": as_text,
    "name": as_str,
    "status": as_choice(ALERT_STATUSES),
    "severity": as_choice(ALERT_SEVERITIES),
    "environment": as_text,
    "service": as_text,
    "source": as_str_list,
    "message": as_text,
    "description": as_text,
    "url": as_text,
    "image_url": as_text,
    "labels": as_str_map,
    "last_received": as_text,
}

_WIRE_NAMES = {"last_received": "lastReceived"}


def utc_now_rfc3339() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class AlertResource(BaseResource):
    model = Alert
    kind = "alert"
    type_suffix = "alert"
    computed_fields = frozenset({"id", "last_received"})
    force_new_fields = frozenset(
        {"fingerprint", "name", "environment", "service", "source", "url", "image_url"}
    )

    def event_payload(self, alert: Alert) -> dict[str, Any]:
        """Request body for POST /alerts/event; empty values are left out."""
        payload = {
            "id": alert.id,
            "fingerprint": alert.fingerprint,
            "name": alert.name,
            "status": alert.status,
            "severity": alert.severity,
            "environment": alert.environment,
            "service": alert.service,
            "source": alert.source or None,
            "message": alert.message,
            "description": alert.description,
            "url": alert.url,
            "image_url": alert.image_url,
            "labels": alert.labels or None,
            "lastReceived": alert.last_received or utc_now_rfc3339(),
        }
        return self._compact(payload)

    def enrich_payload(self, alert: Alert) -> dict[str, Any]:
        return {
            "fingerprint": alert.fingerprint,
            "status": alert.status,
            "severity": alert.severity,
            "message": alert.message,
            "description": alert.description,
            "labels": alert.labels,
        }

    def decode(self, current: Alert, body: Any, action: str) -> Alert:
        """Merge the response over ``current``; omitted fields keep their value."""
        body = self._expect_object(body, action)
        alert = self._decoder.apply(
            current, body, _FIELDS, wire_names=_WIRE_NAMES, reset_omitted=False
        )
        if not alert.fingerprint:
            raise DecodeError(
                f"{action} {self.kind} response has no fingerprint",
                body=json.dumps(body, default=str),
            )
        return alert

    def _require_fingerprint(self, alert: Alert) -> str:
        return self._require_id(alert, field="fingerprint")

    def create(self, desired: Alert) -> Alert:
        payload = self.event_payload(desired)
        self._logger.debug(f"Pushing alert '{desired.name}' ({desired.severity}, {desired.status})")

        body = self._client.post(EVENT_PATH, payload)
        sent = desired.model_copy(update={"last_received": payload["lastReceived"]})
        created = self.decode(sent, body, "create")

        self._logger.info(f"Created alert {created.fingerprint} ('{created.name}')")
        return created

    def read(self, current: Alert) -> Alert:
        fingerprint = self._require_fingerprint(current)
        try:
            body = self._client.get(f"{ALERTS_PATH}/{fingerprint}")
        except APIError as e:
            if e.is_not_found:
                raise NotFoundError(self.kind, fingerprint) from e
            raise
        return self.decode(current, body, "read")

    def update(self, prior: Alert, desired: Alert) -> Alert:
        """Apply status, severity, message, description and labels through enrich.

        Attributes ``desired`` leaves unset keep their ``prior`` value.
        """
        fingerprint = self._require_fingerprint(prior)
        immutable = sorted(self.diff(prior, desired) & self.force_new_fields)
        if immutable:
            raise ResourceValidationError(
                f"{self.kind} {fingerprint}: {', '.join(immutable)} cannot be changed by enrichment"
            )

        target = self.fill_unset(prior, desired).model_copy(
            update={"id": prior.id, "fingerprint": fingerprint, "last_received": prior.last_received}
        )
        body = self._client.post(ENRICH_PATH, self.enrich_payload(target))

        # Enrich may answer with a bare status object rather than the alert.
        if isinstance(body, dict) and body.get("fingerprint"):
            target = self.decode(target, body, "update")

        self._logger.info(f"Enriched alert {fingerprint}")
        return target

    def delete(self, current: Alert) -> None:
        fingerprint = self._require_fingerprint(current)
        self._client.delete(f"{ALERTS_PATH}/{fingerprint}")
        self._logger.info(f"Deleted alert {fingerprint}")

    def import_state(self, identifier: str) -> Alert:
        placeholder = Alert.model_construct(fingerprint=identifier, name="")
        alert = self.read(placeholder)
        if not alert.name:
            raise DecodeError(f"imported {self.kind} {identifier} has no name")
        return Alert.model_validate(alert.model_dump())
