"""Allocation parameter and result models."""

import math
from dataclasses import dataclass
from typing import Any, Dict

from ..utils.error_handling import ConfigurationError, is_positive_finite
from .option import OptionContract

# Reason codes carried by invalid AllocationResults
INVALID_INPUTS = "invalid-inputs"
DEGENERATE_DENOMINATOR = "degenerate-denominator"
SHORT_POSITION_REQUIRED = "short-position-required"
NEGATIVE_SHARES_REQUIRED = "negative-shares-required"
NON_FINITE_RESULT = "non-finite-result"
EXCEEDS_BUDGET = "exceeds-budget"
CONTRACT_COST_EXCEEDS_EQUITY = "contract-cost-exceeds-equity"

REASON_MESSAGES: Dict[str, str] = {
    INVALID_INPUTS: "Invalid input values",
    DEGENERATE_DENOMINATOR: "Invalid calculation: denominator too close to zero",
    SHORT_POSITION_REQUIRED: "Cannot achieve desired leverage (requires short position)",
    NEGATIVE_SHARES_REQUIRED: "Negative shares required (not supported)",
    NON_FINITE_RESULT: "Calculation produced invalid values",
    EXCEEDS_BUDGET: "Total cost exceeds available equity",
    CONTRACT_COST_EXCEEDS_EQUITY: "Contract cost exceeds available equity",
}


@dataclass(frozen=True)
class AllocationParameters:
    """User-supplied targets and filters for one optimization run.

    Attributes:
        total_equity: Capital to deploy in full (T)
        target_leverage: Desired exposure / capital ratio (L); 1.0 means all shares
        selected_expiry: Only contracts with exactly this expiry are eligible
        delta_min: Inclusive lower bound on per-share delta
        delta_max: Inclusive upper bound on per-share delta
    """

    total_equity: float = 10000.0
    target_leverage: float = 1.75
    selected_expiry: str = ""
    delta_min: float = 0.3
    delta_max: float = 0.9

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "AllocationParameters":
        """Create AllocationParameters from dictionary (e.g., from YAML).

        Args:
            config: Dictionary with allocation parameters

        Returns:
            AllocationParameters instance

        Raises:
            ConfigurationError: If a numeric field cannot be converted
        """
        try:
            return cls(
                total_equity=float(config.get('total_equity', 10000.0)),
                target_leverage=float(config.get('target_leverage', 1.75)),
                selected_expiry=str(config.get('selected_expiry') or ''),
                delta_min=float(config.get('delta_min', 0.3)),
                delta_max=float(config.get('delta_max', 0.9)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid allocation parameters: {e}") from e

    def validate(self) -> None:
        """Check the parameters describe a solvable request.

        Raises:
            ConfigurationError: If equity or leverage is not positive, or the
                delta bounds are outside 0 <= delta_min <= delta_max <= 1
        """
        if not is_positive_finite(self.total_equity):
            raise ConfigurationError("Total equity must be greater than 0")

        if not is_positive_finite(self.target_leverage):
            raise ConfigurationError("Leverage must be greater than 0")

        if not (math.isfinite(self.delta_min) and math.isfinite(self.delta_max)):
            raise ConfigurationError("Delta bounds must be finite numbers")

        if not 0.0 <= self.delta_min <= self.delta_max <= 1.0:
            raise ConfigurationError(
                f"Delta bounds must satisfy 0 <= min <= max <= 1 "
                f"(got {self.delta_min} - {self.delta_max})"
            )

    def with_expiry(self, expiry: str) -> "AllocationParameters":
        """Return a copy with a different selected expiry."""
        return AllocationParameters(
            total_equity=self.total_equity,
            target_leverage=self.target_leverage,
            selected_expiry=expiry,
            delta_min=self.delta_min,
            delta_max=self.delta_max,
        )


@dataclass(frozen=True)
class AllocationResult:
    """A (contracts, shares) allocation for one contract.

    Valid results always spend total equity in full (within a cent).
    Invalid results carry a reason code and must never be ranked.
    """

    contract: OptionContract
    contracts_count: float  # int when produced for a fixed contract count
    shares_count: float
    total_cost: float
    achieved_leverage: float
    leverage_gap: float
    delta_exposure: float
    valid: bool
    reason: str | None = None

    @classmethod
    def invalid(
        cls,
        contract: OptionContract,
        reason: str,
        contracts_count: float = 0,
        shares_count: float = 0.0,
        total_cost: float = 0.0,
        achieved_leverage: float = 0.0,
        leverage_gap: float = 0.0,
        delta_exposure: float = 0.0,
    ) -> "AllocationResult":
        """Build a rejected result carrying a reason code."""
        return cls(
            contract=contract,
            contracts_count=contracts_count,
            shares_count=shares_count,
            total_cost=total_cost,
            achieved_leverage=achieved_leverage,
            leverage_gap=leverage_gap,
            delta_exposure=delta_exposure,
            valid=False,
            reason=reason,
        )

    @property
    def contract_cost(self) -> float:
        """Premium paid for the option leg (O*C)."""
        return self.contract.premium_per_contract * self.contracts_count

    @property
    def share_cost(self) -> float:
        """Capital spent on shares (S*N)."""
        return self.total_cost - self.contract_cost

    @property
    def is_whole_contracts(self) -> bool:
        return float(self.contracts_count).is_integer()

    @property
    def message(self) -> str:
        """Human-readable explanation of the reason code (empty when valid)."""
        if self.reason is None:
            return ""
        return REASON_MESSAGES.get(self.reason, self.reason)

    def __repr__(self) -> str:
        """Compact string representation."""
        if not self.valid:
            return f"AllocationResult({self.contract.id} INVALID {self.reason})"
        return (f"AllocationResult({self.contract.id} C={self.contracts_count:g} "
                f"N={self.shares_count:.4f} L={self.achieved_leverage:.3f} "
                f"gap={self.leverage_gap:.4f})")
