"""Single-contract allocation solver.

Solves the two equations that describe a fully invested, leveraged position
in one call option plus shares of the underlying:

    S*N + O*C = T              (spend all equity)
    (N + D*C) * S / T = L      (hit the leverage target)

where S is the stock price, O and D are the per-contract premium and delta,
T is total equity and L the target leverage. Eliminating N gives

    C = T*(L - 1) / (S*D - O)
    N = L*T/S - D*C

Failures are returned as invalid AllocationResults with a reason code; these
functions never raise for bad numeric input.
"""

import math

from ..models.allocation import (
    AllocationResult,
    CONTRACT_COST_EXCEEDS_EQUITY,
    DEGENERATE_DENOMINATOR,
    EXCEEDS_BUDGET,
    INVALID_INPUTS,
    NEGATIVE_SHARES_REQUIRED,
    NON_FINITE_RESULT,
    SHORT_POSITION_REQUIRED,
)
from ..models.option import OptionContract
from ..utils.error_handling import is_positive_finite
from ..utils.logging_config import get_logger

logger = get_logger("allocator")

# |S*D - O| below this is treated as zero (C would blow up)
DENOMINATOR_EPSILON = 0.01

# Allowed overspend, in currency units
BUDGET_TOLERANCE = 0.01


def _inputs_valid(*values: float) -> bool:
    return all(is_positive_finite(v) for v in values)


def _all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def solve_exact(
    contract: OptionContract,
    stock_price: float,
    total_equity: float,
    target_leverage: float,
) -> AllocationResult:
    """Solve for the real-valued contract and share counts.

    Args:
        contract: Option contract to combine with shares
        stock_price: Current underlying price (S)
        total_equity: Capital to deploy (T)
        target_leverage: Desired leverage ratio (L)

    Returns:
        AllocationResult with a fractional contracts_count, or an invalid
        result whose reason is one of invalid-inputs, degenerate-denominator,
        short-position-required, negative-shares-required, non-finite-result
        or exceeds-budget (checked in that order)

    Example:
        >>> contract = OptionContract("AAPL20251115C170", 170.0, "2025-11-15", 8.5, 0.65)
        >>> result = solve_exact(contract, 175.5, 10000, 1.75)
        >>> round(result.contracts_count, 4)
        0.7104
    """
    S = stock_price
    O = contract.premium_per_contract
    D = contract.delta_per_contract
    T = total_equity
    L = target_leverage

    if not _inputs_valid(S, O, D, T, L):
        logger.debug("Invalid inputs for %s: S=%s O=%s D=%s T=%s L=%s", contract.id, S, O, D, T, L)
        return AllocationResult.invalid(contract, INVALID_INPUTS)

    denominator = S * D - O
    if abs(denominator) < DENOMINATOR_EPSILON:
        logger.debug("Degenerate denominator %.6f for %s", denominator, contract.id)
        return AllocationResult.invalid(contract, DEGENERATE_DENOMINATOR)

    C = T * (L - 1) / denominator
    if C < 0:
        logger.debug("%s needs C=%.4f contracts (short) for L=%.2f", contract.id, C, L)
        return AllocationResult.invalid(contract, SHORT_POSITION_REQUIRED)

    N = L * T / S - D * C
    if N < 0:
        logger.debug("%s needs N=%.4f shares (negative) for L=%.2f", contract.id, N, L)
        return AllocationResult.invalid(contract, NEGATIVE_SHARES_REQUIRED)

    total_cost = S * N + O * C
    delta_exposure = N + D * C
    achieved_leverage = delta_exposure * S / T
    leverage_gap = abs(achieved_leverage - L)

    if not _all_finite(C, N, total_cost, achieved_leverage, delta_exposure):
        return AllocationResult.invalid(contract, NON_FINITE_RESULT)

    if total_cost > T + BUDGET_TOLERANCE:
        logger.debug("%s exact cost %.2f exceeds equity %.2f", contract.id, total_cost, T)
        return AllocationResult.invalid(
            contract,
            EXCEEDS_BUDGET,
            contracts_count=C,
            shares_count=N,
            total_cost=total_cost,
            achieved_leverage=achieved_leverage,
            leverage_gap=leverage_gap,
            delta_exposure=delta_exposure,
        )

    return AllocationResult(
        contract=contract,
        contracts_count=C,
        shares_count=N,
        total_cost=total_cost,
        achieved_leverage=achieved_leverage,
        leverage_gap=leverage_gap,
        delta_exposure=delta_exposure,
        valid=True,
    )


def solve_at_contracts(
    contract: OptionContract,
    stock_price: float,
    total_equity: float,
    target_leverage: float,
    contracts: int,
) -> AllocationResult:
    """Allocate with a fixed number of contracts, putting the rest into shares.

    Every dollar not spent on premium buys (possibly fractional) shares, so
    total cost equals total equity by construction.

    Args:
        contract: Option contract to combine with shares
        stock_price: Current underlying price (S)
        total_equity: Capital to deploy (T)
        target_leverage: Desired leverage ratio (L), used for the gap only
        contracts: Number of contracts to buy (C), normally a whole number

    Returns:
        AllocationResult carrying `contracts` unchanged, or an invalid result
        (invalid-inputs, contract-cost-exceeds-equity,
        negative-shares-required or non-finite-result)

    Example:
        >>> contract = OptionContract("AAPL20251115C170", 170.0, "2025-11-15", 8.5, 0.65)
        >>> result = solve_at_contracts(contract, 175.5, 10000, 1.75, 3)
        >>> round(result.shares_count, 4)
        42.4501
    """
    S = stock_price
    O = contract.premium_per_contract
    D = contract.delta_per_contract
    T = total_equity
    L = target_leverage
    C = contracts

    if not _inputs_valid(S, O, D, T, L) or not math.isfinite(C) or C < 0:
        logger.debug("Invalid inputs for %s: S=%s O=%s D=%s T=%s L=%s C=%s", contract.id, S, O, D, T, L, C)
        return AllocationResult.invalid(contract, INVALID_INPUTS, contracts_count=C)

    contract_cost = O * C
    if contract_cost > T:
        logger.debug("%s: %s contracts cost %.2f > equity %.2f", contract.id, C, contract_cost, T)
        return AllocationResult.invalid(
            contract, CONTRACT_COST_EXCEEDS_EQUITY, contracts_count=C, total_cost=contract_cost,
        )

    N = (T - contract_cost) / S
    if N < 0:
        return AllocationResult.invalid(
            contract, NEGATIVE_SHARES_REQUIRED, contracts_count=C, total_cost=contract_cost,
        )

    total_cost = S * N + contract_cost
    delta_exposure = N + D * C
    achieved_leverage = delta_exposure * S / T
    leverage_gap = abs(achieved_leverage - L)

    if not _all_finite(N, total_cost, achieved_leverage, delta_exposure):
        return AllocationResult.invalid(contract, NON_FINITE_RESULT, contracts_count=C)

    return AllocationResult(
        contract=contract,
        contracts_count=C,
        shares_count=N,
        total_cost=total_cost,
        achieved_leverage=achieved_leverage,
        leverage_gap=leverage_gap,
        delta_exposure=delta_exposure,
        valid=True,
    )
