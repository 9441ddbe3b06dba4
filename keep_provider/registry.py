"""Provider registration: configuration, shared client and resource types."""

import logging
from typing import Any

from keep_provider.client import KeepClient
from keep_provider.config import Settings
from keep_provider.errors import ConfigurationError
from keep_provider.log import configure_logging
from keep_provider.resources import (
    AlertResource,
    BaseResource,
    ExtractionRuleResource,
    MappingRuleResource,
    ProviderResource,
)

logger = logging.getLogger(__name__)

TYPE_NAME = "keep"

RESOURCE_TYPES: tuple[type[BaseResource], ...] = (
    ProviderResource,
    ExtractionRuleResource,
    AlertResource,
    MappingRuleResource,
)


class _Unknown:
    """A configuration value that is not known until apply time."""

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = _Unknown()


class KeepProvider:
    """Entry point that resolves settings and hands out resource codecs.

    ``configure`` must run before any resource is requested. Every resource
    shares the one client it builds.
    """

    type_name = TYPE_NAME

    def __init__(self, version: str = "dev"):
        self.version = version
        self._client: KeepClient | None = None
        self._resources: dict[str, BaseResource] = {}

    @staticmethod
    def schema() -> dict[str, Any]:
        return {
            "type_name": TYPE_NAME,
            "attributes": {
                "api_key": {
                    "type": "string",
                    "optional": True,
                    "sensitive": True,
                    "description": "API key for Keep. May also be set with KEEP_API_KEY.",
                },
                "api_url": {
                    "type": "string",
                    "optional": True,
                    "description": "Base URL of the Keep API. May also be set with KEEP_API_URL.",
                },
            },
        }

    def configure(
        self,
        api_key: Any = None,
        api_url: Any = None,
        timeout: float | None = None,
        transport: Any = None,
    ) -> KeepClient:
        """Resolve settings and build the shared client.

        Explicit values win over KEEP_* environment variables; an explicit
        empty string counts as unset.
        """
        for name, value in (("api_key", api_key), ("api_url", api_url)):
            if value is UNKNOWN:
                raise ConfigurationError(
                    f"unknown Keep {name}: the provider cannot be configured with a value "
                    f"that is not known yet; set it statically or via KEEP_{name.upper()}"
                )

        overrides: dict[str, Any] = {}
        if api_key:
            overrides["api_key"] = api_key
        if api_url:
            overrides["api_url"] = api_url
        if timeout is not None:
            overrides["timeout"] = timeout

        settings = Settings(**overrides)
        configure_logging(settings.log_level)

        if not settings.has_api_key:
            logger.warning("No Keep API key configured; requests are sent unauthenticated")

        if self._client is not None:
            self._client.close()
        self._client = KeepClient(
            api_url=settings.api_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            transport=transport,
        )
        self._resources = {}
        for resource_type in RESOURCE_TYPES:
            resource = resource_type(
                self._client, logging.getLogger(resource_type.__module__)
            )
            self._resources[resource.name] = resource

        logger.info(f"Configured Keep provider {self.version} for {self._client.api_url}")
        return self._client

    @property
    def client(self) -> KeepClient:
        if self._client is None:
            raise ConfigurationError("provider is not configured")
        return self._client

    def resources(self) -> dict[str, BaseResource]:
        if self._client is None:
            raise ConfigurationError("provider is not configured")
        return dict(self._resources)

    def resource(self, name: str) -> BaseResource:
        resources = self.resources()
        if name not in resources:
            raise ConfigurationError(
                f"unknown resource type '{name}'; available: {', '.join(sorted(resources))}"
            )
        return resources[name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._resources = {}
