"""Underlying stock quote model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Quote:
    """Current price of the underlying (S), read-only for one optimization run."""

    symbol: str
    price: float
    as_of: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"Quote({self.symbol} ${self.price:.2f} @ {self.as_of.isoformat(timespec='seconds')})"
