"""Structured validation outcome."""

from pydantic import BaseModel, Field, computed_field


class ValidationResult(BaseModel):
    """All violations found in one pass; empty means valid."""

    errors: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.errors
