"""Contract filtering, integer candidate generation and ranking.

Pipeline for one run:
    contracts -> filter (calls, selected expiry, delta band)
              -> exact solve per contract
              -> floor/ceiling whole-contract candidates
              -> fixed-count solve per candidate
              -> keep valid, C > 0
              -> sort by (contracts, leverage gap)
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..data.loaders import OptionsChainData
from ..models.allocation import AllocationParameters, AllocationResult
from ..models.option import OptionContract
from ..models.quote import Quote
from ..utils.logging_config import get_logger
from .allocator import solve_at_contracts, solve_exact

logger = get_logger("optimizer")


@dataclass(frozen=True)
class OptimizationRun:
    """Ranked allocations for one (chain, parameters) pair."""

    quote: Quote
    params: AllocationParameters
    results: List[AllocationResult] = field(default_factory=list)
    optimal: Optional[AllocationResult] = None

    @property
    def has_results(self) -> bool:
        return bool(self.results)


def filter_contracts(
    contracts: List[OptionContract],
    params: AllocationParameters,
) -> List[OptionContract]:
    """Keep call contracts on the selected expiry inside the delta band.

    Args:
        contracts: Contract universe from the chain provider
        params: Parameters carrying selected_expiry, delta_min and delta_max

    Returns:
        Eligible contracts, in input order
    """
    eligible = []
    reject_reasons: Dict[str, int] = {}

    for contract in contracts:
        if contract.kind != "call":
            reject_reasons['not_call'] = reject_reasons.get('not_call', 0) + 1
            continue

        if contract.expiry != params.selected_expiry:
            reject_reasons['expiry'] = reject_reasons.get('expiry', 0) + 1
            continue

        if not params.delta_min <= contract.delta_per_share <= params.delta_max:
            reject_reasons['delta'] = reject_reasons.get('delta', 0) + 1
            continue

        eligible.append(contract)

    logger.debug("Filter results: %d/%d contracts eligible", len(eligible), len(contracts))
    if reject_reasons:
        reasons = [f"{count} ({reason})" for reason, count in reject_reasons.items()]
        logger.debug("Rejected: %s", ", ".join(reasons))

    return eligible


def candidate_contract_counts(exact_contracts: float) -> List[int]:
    """Whole-contract counts bracketing an exact solution.

    Args:
        exact_contracts: Real-valued contract count from solve_exact

    Returns:
        [floor, ceil] with non-positive values dropped and no duplicates

    Example:
        >>> candidate_contract_counts(2.4)
        [2, 3]
        >>> candidate_contract_counts(0.72)
        [1]
        >>> candidate_contract_counts(3.0)
        [3]
    """
    floor_count = math.floor(exact_contracts)
    ceil_count = math.ceil(exact_contracts)

    counts = []
    if floor_count > 0:
        counts.append(floor_count)
    if ceil_count != floor_count and ceil_count > 0:
        counts.append(ceil_count)
    return counts


def _rank_key(result: AllocationResult):
    return (result.contracts_count, result.leverage_gap)


def rank_results(results: List[AllocationResult]) -> List[AllocationResult]:
    """Drop unusable results and sort the rest, fewest contracts first.

    Ties on contract count go to the allocation closest to the target leverage.
    The sort is stable, so fully equal keys keep their input order.
    """
    usable = [r for r in results if r.valid and r.contracts_count > 0]
    return sorted(usable, key=_rank_key)


def compute_all(
    contracts: List[OptionContract],
    quote: Quote,
    params: AllocationParameters,
) -> List[AllocationResult]:
    """Compute every purchasable, fully invested allocation and rank them.

    Args:
        contracts: Contract universe
        quote: Underlying quote supplying the stock price
        params: Equity, leverage target and contract filters

    Returns:
        Valid allocations with whole, positive contract counts, sorted by
        (contracts_count, leverage_gap). Empty when nothing is feasible.

    Note:
        Contracts whose exact solve is invalid contribute nothing; this
        function does not raise for individual bad contracts.
    """
    eligible = filter_contracts(contracts, params)
    results: List[AllocationResult] = []
    skipped: Dict[str, int] = {}

    for contract in eligible:
        exact = solve_exact(contract, quote.price, params.total_equity, params.target_leverage)
        if not exact.valid:
            logger.debug("Skipping %s: %s", contract.id, exact.message)
            skipped[exact.message] = skipped.get(exact.message, 0) + 1
            continue

        for count in candidate_contract_counts(exact.contracts_count):
            candidate = solve_at_contracts(
                contract, quote.price, params.total_equity, params.target_leverage, count,
            )
            if candidate.valid and candidate.contracts_count > 0:
                results.append(candidate)
            else:
                reason = candidate.message or "No contracts to buy"
                skipped[reason] = skipped.get(reason, 0) + 1

    ranked = sorted(results, key=_rank_key)

    logger.info(
        "Computed %d allocations from %d eligible contracts (%d in universe)",
        len(ranked), len(eligible), len(contracts)
    )
    if skipped:
        reasons = [f"{count} ({reason})" for reason, count in skipped.items()]
        logger.info("Skipped: %s", ", ".join(reasons))

    return ranked


def pick_optimal(results: List[AllocationResult]) -> Optional[AllocationResult]:
    """Return the best allocation, or None when there is none.

    Does not assume the input is sorted or pre-filtered.
    """
    ranked = rank_results(results)
    if not ranked:
        return None
    return ranked[0]


def optimize(chain: OptionsChainData, params: AllocationParameters) -> OptimizationRun:
    """Validate parameters and run a full recompute over a chain.

    Args:
        chain: Contracts and quote from the data layer
        params: Allocation parameters

    Returns:
        OptimizationRun with ranked results and the optimal allocation.
        With no expiry selected the run is empty.

    Raises:
        ConfigurationError: If the parameters are not solvable
    """
    params.validate()

    if not params.selected_expiry:
        logger.warning("No expiry selected for %s - nothing to compute", chain.symbol)
        return OptimizationRun(quote=chain.quote, params=params)

    listed = chain.contracts_for_expiry(params.selected_expiry)
    if not listed:
        logger.warning("No contracts listed for %s expiry %s", chain.symbol, params.selected_expiry)

    results = compute_all(listed, chain.quote, params)
    optimal = pick_optimal(results)

    if optimal is None:
        logger.info("No feasible allocation for %s %s", chain.symbol, params.selected_expiry)
    else:
        logger.info("Optimal: %r", optimal)

    return OptimizationRun(quote=chain.quote, params=params, results=results, optimal=optimal)
