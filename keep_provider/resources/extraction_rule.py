"""Extraction rule resource."""

import json
from typing import Any

from keep_provider.decoding import as_bool, as_int, as_str, as_text
from keep_provider.errors import DecodeError
from keep_provider.lookup import find_remote
from keep_provider.models.extraction_rule import ExtractionRule
from keep_provider.resources.base import BaseResource

EXTRACTION_PATH = "/extraction"

_FIELDS = {
    "name": as_str,
    "description": as_text,
    "priority": as_int,
    "disabled": as_bool,
    "pre": as_bool,
    "condition": as_text,
    "attribute": as_str,
    "regex": as_str,
}


class ExtractionRuleResource(BaseResource):
    """Extraction rules, updated in place; the id is stable."""

    model = ExtractionRule
    kind = "extraction rule"
    type_suffix = "extraction_rule"

    def build_payload(self, rule: ExtractionRule) -> dict[str, Any]:
        return self._compact({
            "name": rule.name,
            "description": rule.description,
            "priority": rule.priority,
            "disabled": rule.disabled,
            "pre": rule.pre,
            "condition": rule.condition,
            "attribute": rule.attribute,
            "regex": rule.regex,
        })

    def decode(self, current: ExtractionRule, body: Any, action: str) -> ExtractionRule:
        body = self._expect_object(body, action)
        return self._decoder.apply(current, body, _FIELDS)

    def create(self, desired: ExtractionRule) -> ExtractionRule:
        body = self._expect_object(
            self._client.post(EXTRACTION_PATH, self.build_payload(desired)), "create"
        )
        rule_id = self._decode_id(body, "create")
        created = self.decode(desired.model_copy(update={"id": rule_id}), body, "create")

        self._logger.info(f"Created extraction rule {created.id} ('{created.name}')")
        return created

    def _fetch(self, rule_id: str) -> dict[str, Any]:
        # Keep has no GET /extraction/{id}; scan the list.
        return find_remote(
            self._client,
            rule_id,
            list_path=EXTRACTION_PATH,
            kind=self.kind,
            log=self._logger,
        )

    def read(self, current: ExtractionRule) -> ExtractionRule:
        rule_id = self._require_id(current)
        return self.decode(current, self._fetch(rule_id), "read")

    def update(self, prior: ExtractionRule, desired: ExtractionRule) -> ExtractionRule:
        rule_id = self._require_id(prior)
        body = self._client.put(f"{EXTRACTION_PATH}/{rule_id}", self.build_payload(desired))
        updated = self.decode(desired.model_copy(update={"id": rule_id}), body, "update")

        self._logger.info(f"Updated extraction rule {rule_id}")
        return updated

    def delete(self, current: ExtractionRule) -> None:
        rule_id = self._require_id(current)
        self._client.delete(f"{EXTRACTION_PATH}/{rule_id}")
        self._logger.info(f"Deleted extraction rule {rule_id}")

    def import_state(self, identifier: str) -> ExtractionRule:
        body = self._fetch(identifier)
        rule = self.decode(
            ExtractionRule(id=identifier, name="", attribute="", regex=""), body, "import"
        )
        if not (rule.name and rule.attribute and rule.regex):
            raise DecodeError(
                f"imported {self.kind} {identifier} lacks name, attribute or regex",
                body=json.dumps(body),
            )
        return rule
