"""Core OptionContract data model."""

from dataclasses import dataclass
from typing import Literal

# One listed equity option controls 100 shares of the underlying.
CONTRACT_MULTIPLIER = 100


@dataclass(frozen=True)
class OptionContract:
    """Represents a single option contract as supplied by the chain provider.

    Immutable dataclass to prevent accidental mutations during optimization.
    Premium and delta are quoted per underlying share; use the per-contract
    properties for anything that is bought in whole contracts.
    """

    id: str
    strike: float
    expiry: str  # ISO date (YYYY-MM-DD), matched by string equality
    premium_per_share: float
    delta_per_share: float
    kind: Literal["call", "put"] = "call"

    @property
    def premium_per_contract(self) -> float:
        """Cost of one contract (O)."""
        return self.premium_per_share * CONTRACT_MULTIPLIER

    @property
    def delta_per_contract(self) -> float:
        """Share-equivalent exposure of one contract (D)."""
        return self.delta_per_share * CONTRACT_MULTIPLIER

    def __repr__(self) -> str:
        """Compact string representation for debugging."""
        return (f"OptionContract({self.id} {self.strike:g}{self.kind[0].upper()} "
                f"{self.expiry} prem={self.premium_per_share:.2f} Δ={self.delta_per_share:.3f})")
