#!/usr/bin/env python3
"""Find the optimal call option + share allocation for a leverage target.

Usage:
    python3 optimize_leverage.py --symbol AAPL
    python3 optimize_leverage.py --symbol MSFT --equity 25000 --leverage 2.0
    python3 optimize_leverage.py --csv data/AAPL_options.csv --price 175.5
"""

import argparse
import sys

from leverage_optimizer.allocation.optimizer import optimize
from leverage_optimizer.data.loaders import OptionsChainData, load_contracts_from_csv
from leverage_optimizer.data.mock_chain import generate_mock_chain
from leverage_optimizer.models.allocation import AllocationParameters
from leverage_optimizer.models.quote import Quote
from leverage_optimizer.output.console import (
    print_header,
    print_no_results,
    print_optimal,
    print_parameters,
    print_ranked_results,
)
from leverage_optimizer.utils.config import load_config
from leverage_optimizer.utils.error_handling import OptimizerError
from leverage_optimizer.utils.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Optimize a call option + share allocation for a target leverage',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mock chain for AAPL with defaults ($10,000 at 1.75x)
  python3 optimize_leverage.py --symbol AAPL

  # Custom budget, leverage and delta band
  python3 optimize_leverage.py --symbol NVDA --equity 50000 \\
      --leverage 2.5 --delta-min 0.4 --delta-max 0.8

  # Chain from CSV (see generate_sample_data.py)
  python3 optimize_leverage.py --csv data/AAPL_options.csv --price 175.5 \\
      --expiry 2025-11-15
        """
    )

    parser.add_argument('--config', help='YAML file overriding default_params.yaml')
    parser.add_argument('--symbol', help='Underlying symbol (default from config)')
    parser.add_argument('--csv', dest='csv_file', help='Load contracts from CSV instead of the mock chain')
    parser.add_argument('--price', type=float, help='Stock price (required with --csv)')
    parser.add_argument('--expiry', help='Expiry to optimize (default: first available)')
    parser.add_argument('--equity', type=float, help='Total equity to deploy')
    parser.add_argument('--leverage', type=float, help='Target leverage ratio (1.0 = all shares)')
    parser.add_argument('--delta-min', type=float, help='Minimum per-share delta')
    parser.add_argument('--delta-max', type=float, help='Maximum per-share delta')
    parser.add_argument('--pricing-model', choices=['simple', 'black_scholes'],
                        help='Mock chain pricing model')
    parser.add_argument('--top-n', type=int, help='Rows to show in the ranked table')
    parser.add_argument('--log-level', help='Logging level (default from config: WARNING)')
    return parser


def load_chain(args, config) -> OptionsChainData:
    symbol = args.symbol or config['market']['symbol']

    if args.csv_file:
        contracts = load_contracts_from_csv(args.csv_file)
        return OptionsChainData(Quote(symbol=symbol.upper(), price=args.price), contracts)

    pricing_model = args.pricing_model or config['market']['pricing_model']
    return generate_mock_chain(symbol, pricing_model=pricing_model)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.csv_file and args.price is None:
        parser.error("--price is required with --csv")

    try:
        config = load_config(args.config)
        configure_logging(config, args.log_level)

        allocation = dict(config['allocation'])
        overrides = {
            'total_equity': args.equity,
            'target_leverage': args.leverage,
            'delta_min': args.delta_min,
            'delta_max': args.delta_max,
            'selected_expiry': args.expiry,
        }
        allocation.update({k: v for k, v in overrides.items() if v is not None})
        params = AllocationParameters.from_dict(allocation)

        chain = load_chain(args, config)

        if not params.selected_expiry and chain.expiry_dates:
            params = params.with_expiry(chain.expiry_dates[0])

        run = optimize(chain, params)

    except (OptimizerError, FileNotFoundError, ValueError) as e:
        print(f"\n❌ {e}", file=sys.stderr)
        return 1

    top_n = args.top_n if args.top_n is not None else config['output']['top_n']

    print_header(run.quote)
    print_parameters(run.params)
    print(f"  Available expiries: {', '.join(chain.expiry_dates)}")

    if run.optimal is None:
        print_no_results()
        return 0

    print_optimal(run.optimal)
    print_ranked_results(run.results, top_n=top_n)
    return 0


if __name__ == '__main__':
    sys.exit(main())
