"""CRUD codecs for each Keep resource type."""

from keep_provider.resources.alert import AlertResource
from keep_provider.resources.base import BaseResource, PlanAction
from keep_provider.resources.extraction_rule import ExtractionRuleResource
from keep_provider.resources.mapping_rule import MappingRuleResource
from keep_provider.resources.provider import ProviderResource

__all__ = [
    "AlertResource",
    "BaseResource",
    "ExtractionRuleResource",
    "MappingRuleResource",
    "PlanAction",
    "ProviderResource",
]
