"""Mapping rule resource.

Keep has no endpoint for updating a mapping rule, so ``update`` deletes the
rule and creates it again. The rule's id therefore changes on every update;
callers must store the id returned by ``update`` and never reuse the old one.
"""

import json
from typing import Any

from keep_provider.csv_data import normalize_csv, parse_csv_data
from keep_provider.decoding import as_bool, as_id, as_int, as_matchers, as_str, as_text
from keep_provider.errors import DecodeError
from keep_provider.lookup import find_remote
from keep_provider.models.mapping_rule import MappingRule
from keep_provider.resources.base import BaseResource

MAPPING_PATH = "/mapping"

_FIELDS = {
    "id": as_id,
    "name": as_str,
    "description": as_text,
    "priority": as_int,
    "disabled": as_bool,
    "matchers": as_matchers,
}


def _preview(text: str, max_len: int = 50) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


class MappingRuleResource(BaseResource):
    """Mapping rules: CSV lookup tables applied to matching alerts."""

    model = MappingRule
    kind = "mapping rule"
    type_suffix = "mapping_rule"
    ignored_fields = frozenset({"disabled"})

    def normalize_value(self, field: str, value: Any) -> Any:
        if field == "csv_data":
            return normalize_csv(value)
        return value

    def build_payload(self, rule: MappingRule) -> dict[str, Any]:
        """Request body for POST /mapping.

        CSV data is validated here, so a malformed table fails before any
        request is sent. ``disabled`` is never sent: Keep does not support it.
        """
        payload: dict[str, Any] = {
            "name": rule.name,
            "description": rule.description,
            "priority": rule.priority,
            "matchers": [[key, value] for key, value in rule.matchers],
        }

        if rule.csv_data:
            rows = parse_csv_data(rule.csv_data)
            payload["type"] = "csv"
            payload["csv_data"] = rule.csv_data
            payload["rows"] = rows
            self._logger.debug(
                f"Mapping rule '{rule.name}' carries {len(rows)} CSV row(s): "
                f"{_preview(rule.csv_data)!r}"
            )

        return self._compact(payload)

    def decode(
        self,
        current: MappingRule,
        body: Any,
        action: str,
        require_id: bool = False,
    ) -> MappingRule:
        body = self._expect_object(body, action)
        if require_id:
            current = current.model_copy(update={"id": self._decode_id(body, action)})

        rule = self._decoder.apply(current, body, _FIELDS, keep_on_omit={"id"})

        # An omitted csv_data means "unchanged"; keep the local table.
        if "csv_data" in body:
            csv_value = body["csv_data"]
            if isinstance(csv_value, str) and csv_value:
                rule = rule.model_copy(update={"csv_data": normalize_csv(csv_value)})
            elif csv_value is None or csv_value == "":
                rule = rule.model_copy(update={"csv_data": None})
            else:
                self._logger.warning(
                    f"Ignoring csv_data of type {type(csv_value).__name__} in {self.kind} response"
                )

        return rule

    def create(self, desired: MappingRule) -> MappingRule:
        payload = self.build_payload(desired)
        self._logger.debug(f"Creating mapping rule '{desired.name}'")

        body = self._client.post(MAPPING_PATH, payload)
        created = self.decode(desired, body, "create", require_id=True)

        self._logger.info(f"Created mapping rule {created.id} ('{created.name}')")
        return created

    def _fetch(self, rule_id: str) -> dict[str, Any]:
        return find_remote(
            self._client,
            rule_id,
            list_path=MAPPING_PATH,
            direct_path=f"{MAPPING_PATH}/{rule_id}",
            kind=self.kind,
            log=self._logger,
        )

    def read(self, current: MappingRule) -> MappingRule:
        rule_id = self._require_id(current)
        return self.decode(current, self._fetch(rule_id), "read")

    def update(self, prior: MappingRule, desired: MappingRule) -> MappingRule:
        """Delete ``prior`` and create ``desired``; the returned id is new."""
        rule_id = self._require_id(prior)
        payload = self.build_payload(desired)

        self._logger.info(f"Replacing mapping rule {rule_id}: Keep cannot update it in place")
        self._client.delete(f"{MAPPING_PATH}/{rule_id}")

        body = self._client.post(MAPPING_PATH, payload)
        updated = self.decode(desired.model_copy(update={"id": None}), body, "update", require_id=True)

        self._logger.info(f"Mapping rule {rule_id} recreated as {updated.id}")
        return updated

    def delete(self, current: MappingRule) -> None:
        rule_id = self._require_id(current)
        self._client.delete(f"{MAPPING_PATH}/{rule_id}")
        self._logger.info(f"Deleted mapping rule {rule_id}")

    def import_state(self, identifier: str) -> MappingRule:
        body = self._fetch(identifier)
        rule = self.decode(MappingRule(id=identifier, name=""), body, "import")
        if not rule.name:
            raise DecodeError(f"imported {self.kind} {identifier} has no name", body=json.dumps(body))
        return rule
