"""Options Leverage Optimizer.

Finds whole-contract call option + fractional share allocations that spend a
fixed equity budget in full while targeting a leverage ratio.
"""

from .allocation.allocator import solve_at_contracts, solve_exact
from .allocation.optimizer import (
    OptimizationRun,
    compute_all,
    filter_contracts,
    optimize,
    pick_optimal,
    rank_results,
)
from .data.loaders import OptionsChainData
from .models import AllocationParameters, AllocationResult, OptionContract, Quote

__version__ = "0.1.0"

__all__ = [
    "OptionContract",
    "Quote",
    "AllocationParameters",
    "AllocationResult",
    "OptionsChainData",
    "OptimizationRun",
    "solve_exact",
    "solve_at_contracts",
    "filter_contracts",
    "compute_all",
    "rank_results",
    "pick_optimal",
    "optimize",
]
