"""Provider resource - installs and configures Keep integrations."""

import json
from typing import Any

from keep_provider.decoding import as_bool, as_id, as_str, as_str_map, as_text
from keep_provider.errors import DecodeError, ReplacementRequiredError
from keep_provider.lookup import find_remote
from keep_provider.models.provider import Provider
from keep_provider.resources.base import BaseResource

PROVIDERS_PATH = "/providers"
INSTALL_PATH = "/providers/install"

_FIELDS = {
    "id": as_id,
    "name": as_str,
    "type": as_str,
    "config": as_str_map,
    "installed": as_bool,
    "last_alert_received": as_text,
}


class ProviderResource(BaseResource):
    """Keep providers.

    ``type`` is immutable: a change is planned as a replacement and
    ``update`` refuses it. Keep does not echo secret config back, so a
    response without ``config`` keeps the local one.
    """

    model = Provider
    kind = "provider"
    type_suffix = "provider"
    computed_fields = frozenset({"id", "installed", "last_alert_received"})
    force_new_fields = frozenset({"type"})
    sensitive_fields = frozenset({"config"})

    def install_payload(self, provider: Provider) -> dict[str, Any]:
        """Request body for POST /providers/install.

        Config entries are flattened into the top level of the request.
        """
        payload: dict[str, Any] = {
            "provider_id": provider.type,
            "provider_name": provider.name,
            "provider_type": provider.type,
            "pulling_enabled": True,
        }
        payload.update(provider.config)
        return payload

    def decode(self, current: Provider, body: Any, action: str) -> Provider:
        body = self._expect_object(body, action)
        if isinstance(body.get("provider"), dict):
            body = body["provider"]
        return self._decoder.apply(current, body, _FIELDS, keep_on_omit={"id", "config"})

    def create(self, desired: Provider) -> Provider:
        self._logger.debug(f"Installing provider '{desired.name}' of type {desired.type}")

        body = self._expect_object(self._client.post(INSTALL_PATH, self.install_payload(desired)), "create")
        if isinstance(body.get("provider"), dict):
            body = body["provider"]
        provider_id = self._decode_id(body, "create")
        created = self.decode(desired.model_copy(update={"id": provider_id}), body, "create")

        self._logger.info(f"Created provider {created.id} ('{created.name}')")
        return created

    def _fetch(self, provider_id: str) -> dict[str, Any]:
        return find_remote(
            self._client,
            provider_id,
            list_path=PROVIDERS_PATH,
            direct_path=f"{PROVIDERS_PATH}/{provider_id}",
            direct_key="provider",
            list_key="providers",
            kind=self.kind,
            log=self._logger,
        )

    def read(self, current: Provider) -> Provider:
        provider_id = self._require_id(current)
        self._logger.debug(f"Reading provider {provider_id}")
        return self.decode(current, self._fetch(provider_id), "read")

    def update(self, prior: Provider, desired: Provider) -> Provider:
        provider_id = self._require_id(prior)
        desired = self.fill_unset(prior, desired)
        if desired.type != prior.type:
            raise ReplacementRequiredError(self.kind, "type", prior.type, desired.type)

        body = self._client.put(
            f"{PROVIDERS_PATH}/{provider_id}",
            {"name": desired.name, "config": desired.config},
        )
        updated = self.decode(desired.model_copy(update={"id": provider_id}), body, "update")

        self._logger.info(f"Updated provider {provider_id} ('{updated.name}')")
        return updated

    def delete(self, current: Provider) -> None:
        provider_id = self._require_id(current)
        self._client.delete(f"{PROVIDERS_PATH}/{provider_id}")
        self._logger.info(f"Deleted provider {provider_id} ('{current.name}')")

    def import_state(self, identifier: str) -> Provider:
        body = self._fetch(identifier)
        # name and type are filled from the response; validation runs after decoding.
        placeholder = Provider.model_construct(id=identifier, name="", type="", config={})
        provider = self.decode(placeholder, body, "import")
        if not (provider.name and provider.type):
            raise DecodeError(
                f"imported {self.kind} {identifier} lacks name or type",
                body=json.dumps(body, default=str),
            )
        return Provider.model_validate(provider.model_dump())
