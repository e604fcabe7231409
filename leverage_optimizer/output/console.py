"""Console output formatter for allocation results."""

from typing import List

from ..models.allocation import AllocationParameters, AllocationResult
from ..models.quote import Quote


def format_number(value: float, decimals: int = 2) -> str:
    """Fixed-point string with the given number of decimals.

    Example:
        >>> format_number(42.45014, 3)
        '42.450'
    """
    return f"{value:.{decimals}f}"


def format_contracts(result: AllocationResult) -> str:
    """Whole counts as integers, exact (fractional) solutions to 4 decimals."""
    if result.is_whole_contracts:
        return str(int(result.contracts_count))
    return format_number(result.contracts_count, 4)


def print_header(quote: Quote):
    """Print optimization session header.

    Args:
        quote: Underlying quote used for the run
    """
    print("\n" + "=" * 80)
    print(f"  OPTIONS LEVERAGE OPTIMIZER - {quote.symbol}")
    print(f"  Stock Price: ${format_number(quote.price)}")
    print("=" * 80)


def print_parameters(params: AllocationParameters):
    """Print the targets and filters of a run."""
    print("\nParameters:")
    print(f"  Total equity:     ${params.total_equity:,.2f}")
    print(f"  Target leverage:  {params.target_leverage:.2f}x ({params.target_leverage:.0%})")
    print(f"  Expiry:           {params.selected_expiry or 'N/A'}")
    print(f"  Delta range:      {params.delta_min:.2f} - {params.delta_max:.2f}")


def print_no_results():
    """Explain an empty result list (nothing feasible, not an error)."""
    print("\nNo valid options found matching your criteria. "
          "Try adjusting the delta range or leverage.")


def print_optimal(result: AllocationResult):
    """Print the optimal allocation in detail.

    Args:
        result: Top-ranked allocation
    """
    contract = result.contract

    print(f"\n{'=' * 80}")
    print("Optimal Contract (Fewest Contracts, Best Leverage)")
    print(f"{'=' * 80}")

    print(f"\n  Contract:          {contract.id}")
    print(f"  Strike Price:      ${format_number(contract.strike)}")
    print(f"  Delta:             {format_number(contract.delta_per_share, 3)}")
    print(f"  Premium:           ${format_number(contract.premium_per_share)} / share "
          f"(${format_number(contract.premium_per_contract)} / contract)")

    print("\nAllocation:")
    print(f"  Contracts:         {format_contracts(result)}")
    print(f"  Shares:            {format_number(result.shares_count, 4)}")
    print(f"  Contract cost:     ${result.contract_cost:,.2f}")
    print(f"  Share cost:        ${result.share_cost:,.2f}")
    print(f"  Total cost:        ${result.total_cost:,.2f}")

    print("\nExposure:")
    print(f"  Delta exposure:    {format_number(result.delta_exposure)} share-equivalents")
    print(f"  Leverage:          {format_number(result.achieved_leverage, 3)}x")
    print(f"  Leverage gap:      {format_number(result.leverage_gap, 4)}")
    print(f"{'=' * 80}\n")


def print_ranked_results(results: List[AllocationResult], top_n: int | None = None):
    """Print ranked allocations as a compact table.

    Args:
        results: Allocations sorted by (contracts, leverage gap)
        top_n: Optional limit on rows shown
    """
    if not results:
        print_no_results()
        return

    shown = results[:top_n] if top_n is not None else results

    print(f"\nAll Valid Allocations ({len(results)}):")
    print("-" * 100)

    header = (
        f"{'Rank':>4} {'Contract':<20} {'Strike':>8} {'Delta':>6} {'Premium':>8} "
        f"{'C':>4} {'Shares':>10} {'Total Cost':>11} {'Leverage':>9} {'Gap':>7}"
    )
    print(header)
    print("-" * 100)

    for rank, result in enumerate(shown, start=1):
        c = result.contract
        row = (
            f"{rank:>4} {c.id:<20} {c.strike:>8.2f} {c.delta_per_share:>6.3f} "
            f"{c.premium_per_share:>8.2f} {format_contracts(result):>4} "
            f"{result.shares_count:>10.4f} {result.total_cost:>11,.2f} "
            f"{result.achieved_leverage:>8.3f}x {result.leverage_gap:>7.4f}"
        )
        print(row)

    print("-" * 100)
    if len(shown) < len(results):
        print(f"  ... {len(results) - len(shown)} more")
