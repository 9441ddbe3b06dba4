"""Extraction rule model."""

from pydantic import BaseModel, Field


class ExtractionRule(BaseModel):
    """Extraction rule: populates an alert attribute from a regex match."""

    id: str | None = None  # numeric on the wire
    name: str
    description: str | None = None
    priority: int = Field(default=0, description="Lower numbers are evaluated first.")
    disabled: bool = False
    pre: bool = Field(default=False, description="Run before other rules.")
    condition: str | None = Field(
        default=None,
        description="CEL expression gating the rule; always applied when unset.",
    )
    attribute: str = Field(description="The alert attribute to populate.")
    regex: str = Field(description="Pattern whose named groups supply the value.")
