"""
Account balance models.

Models:
    BalanceEntry: free / used / total for one currency
    Balance: All currency balances of the account
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class BalanceEntry(BaseModel):
    """
    Balance of a single currency.

    Attributes:
        free: Available for trading.
        used: Locked in open orders (vendor "frozen").
        total: free + used.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    free: Optional[Decimal] = None
    used: Optional[Decimal] = None
    total: Optional[Decimal] = None

    @model_validator(mode="after")
    def validate_total(self) -> "BalanceEntry":
        if self.free is not None and self.used is not None and self.total is not None:
            if self.total != self.free + self.used:
                raise ValueError(f"total ({self.total}) must equal free + used")
        return self


class Balance(BaseModel):
    """Account balances keyed by currency code."""

    model_config = {"frozen": True, "extra": "forbid"}

    timestamp: Optional[int] = Field(default=None, ge=0)
    currencies: Dict[str, BalanceEntry] = Field(default_factory=dict)
    info: Dict[str, Any] = Field(default_factory=dict)

    def get(self, code: str) -> Optional[BalanceEntry]:
        """Return the balance of one currency, or None."""
        return self.currencies.get(code)

    @property
    def free(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.free for code, entry in self.currencies.items()}

    @property
    def total(self) -> Dict[str, Optional[Decimal]]:
        return {code: entry.total for code, entry in self.currencies.items()}
