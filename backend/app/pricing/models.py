"""Value objects produced by the pricing calculator."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PricingQuote(BaseModel):
    """Base, tax and total for a single plan selection."""

    base: int = Field(ge=0)
    tax: int = Field(ge=0)
    total: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_total(self) -> "PricingQuote":
        if self.total != self.base + self.tax:
            raise ValueError("total must equal base + tax")
        return self

    @classmethod
    def from_base(cls, base: int, tax: int) -> "PricingQuote":
        return cls(base=base, tax=tax, total=base + tax)
