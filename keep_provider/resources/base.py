"""Base class for Keep resources."""

import json
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel

from keep_provider.client import KeepClient
from keep_provider.decoding import ResponseDecoder, UnexpectedShape, as_id
from keep_provider.errors import DecodeError, ResourceValidationError

TYPE_NAME_PREFIX = "keep"


class PlanAction(str, Enum):
    CREATE = "create"
    NOOP = "noop"
    UPDATE = "update"
    REPLACE = "replace"  # delete and create; the remote object changes identity


class BaseResource(ABC):
    """CRUD codec for one Keep resource type.

    Subclasses translate between their pydantic model and the Keep API's JSON
    payloads. Every mutating call returns the model decoded from the server's
    answer, which replaces the caller's copy.
    """

    model: type[BaseModel]
    kind: str = "resource"
    type_suffix: str = ""

    # Attributes the server owns; never compared when planning.
    computed_fields: frozenset[str] = frozenset({"id"})
    # Attributes that cannot change in place.
    force_new_fields: frozenset[str] = frozenset()
    sensitive_fields: frozenset[str] = frozenset()
    # Attributes accepted in configuration that the server ignores.
    ignored_fields: frozenset[str] = frozenset()

    def __init__(self, client: KeepClient, logger: logging.Logger | None = None):
        self._client = client
        self._logger = logger or logging.getLogger(type(self).__module__)
        self._decoder = ResponseDecoder(self._logger, self.kind)

    @property
    def name(self) -> str:
        return f"{TYPE_NAME_PREFIX}_{self.type_suffix}"

    @abstractmethod
    def create(self, desired: Any) -> Any:
        """Create the remote object and return the decoded model."""

    @abstractmethod
    def read(self, current: Any) -> Any:
        """Refresh ``current`` from the server.

        Raises NotFoundError when the object no longer exists.
        """

    @abstractmethod
    def update(self, prior: Any, desired: Any) -> Any:
        """Converge the remote object from ``prior`` to ``desired``."""

    @abstractmethod
    def delete(self, current: Any) -> None:
        """Delete the remote object."""

    @abstractmethod
    def import_state(self, identifier: str) -> Any:
        """Build a full model for an existing remote object."""

    def schema(self) -> dict[str, Any]:
        """JSON schema of the model plus attribute behaviour."""
        return {
            "type_name": self.name,
            "attributes": self.model.model_json_schema(),
            "computed": sorted(self.computed_fields),
            "force_new": sorted(self.force_new_fields),
            "sensitive": sorted(self.sensitive_fields),
        }

    def normalize_value(self, field: str, value: Any) -> Any:
        """Hook for fields compared under an equivalence rather than equality."""
        return value

    def diff(self, prior: BaseModel, desired: BaseModel) -> set[str]:
        """Configurable attributes whose desired value differs from ``prior``.

        Attributes ``desired`` leaves unset, or sets to None, are not compared.
        """
        skip = self.computed_fields | self.ignored_fields
        changed: set[str] = set()
        for field in type(desired).model_fields:
            if field in skip or field not in desired.model_fields_set:
                continue
            wanted = getattr(desired, field)
            if wanted is None:
                continue
            if self.normalize_value(field, wanted) != self.normalize_value(
                field, getattr(prior, field)
            ):
                changed.add(field)
        return changed

    def plan(self, prior: BaseModel | None, desired: BaseModel) -> PlanAction:
        """Decide how ``desired`` converges from the observed ``prior``."""
        if prior is None:
            return PlanAction.CREATE
        changed = self.diff(prior, desired)
        if changed & self.force_new_fields:
            return PlanAction.REPLACE
        if changed:
            return PlanAction.UPDATE
        return PlanAction.NOOP

    @staticmethod
    def fill_unset(prior: BaseModel, desired: BaseModel) -> BaseModel:
        """``desired`` with every attribute it leaves unset taken from ``prior``."""
        unset = set(type(desired).model_fields) - desired.model_fields_set
        return desired.model_copy(update={field: getattr(prior, field) for field in unset})

    def _require_id(self, model: Any, field: str = "id") -> str:
        value = getattr(model, field, None)
        if not value:
            raise ResourceValidationError(f"{self.kind} {field} is missing from state")
        return value

    def _expect_object(self, body: Any, action: str) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise DecodeError(
                f"expected a JSON object from {action} {self.kind}, "
                f"got {type(body).__name__}",
                body=str(body),
            )
        return body

    def _decode_id(self, body: dict[str, Any], action: str, field: str = "id") -> str:
        """The server-assigned identifier; a response without one is a decode error."""
        try:
            value = as_id(body.get(field))
        except UnexpectedShape as e:
            raise DecodeError(
                f"{action} {self.kind} response has no usable {field}: {e}",
                body=json.dumps(body, default=str),
            ) from e
        if not value:
            raise DecodeError(
                f"{action} {self.kind} response has an empty {field}",
                body=json.dumps(body, default=str),
            )
        return value

    @staticmethod
    def _compact(payload: dict[str, Any]) -> dict[str, Any]:
        """Drop unset optional fields rather than sending null."""
        return {k: v for k, v in payload.items() if v is not None}
