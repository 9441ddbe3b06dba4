"""Resource models for the Keep provider."""

from keep_provider.models.alert import Alert, AlertSeverity, AlertStatus
from keep_provider.models.extraction_rule import ExtractionRule
from keep_provider.models.mapping_rule import MappingRule, Matcher
from keep_provider.models.provider import Provider

__all__ = [
    "Alert",
    "AlertSeverity",
    "AlertStatus",
    "ExtractionRule",
    "MappingRule",
    "Matcher",
    "Provider",
]
