"""Mapping rule model - enriches alerts from a CSV lookup table."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

Matcher = tuple[str, str]


class MappingRule(BaseModel):
    """Mapping rule as declared in configuration.

    The API cannot update a rule in place: an update deletes the rule and
    creates a new one, so ``id`` changes on every update.
    """

    id: str | None = Field(default=None, description="Server-assigned identifier.")
    name: str = Field(description="The name of the mapping rule.")
    description: str | None = None
    priority: int = Field(default=0, description="Lower numbers have higher priority.")
    # Accepted for compatibility; Keep ignores it and it is never sent.
    disabled: bool = False
    matchers: list[Matcher] = Field(
        default_factory=list,
        description="Ordered key/value conditions selecting the alerts this rule applies to.",
    )
    csv_data: str | None = Field(
        default=None,
        description="CSV lookup table; the first line is the header.",
    )

    @field_validator("matchers", mode="before")
    @classmethod
    def _pairs_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return list(value.items())
        return value

    @property
    def matchers_map(self) -> dict[str, str]:
        """Matchers as a mapping; later duplicates win."""
        return dict(self.matchers)
