"""Generate sample option chain CSVs for the Options Leverage Optimizer.

Usage:
    python3 generate_sample_data.py AAPL
    python3 generate_sample_data.py NVDA --pricing-model black_scholes --out data/NVDA.csv
"""

import argparse

from leverage_optimizer.data.mock_chain import generate_mock_chain, write_chain_csv


def main():
    """Generate a mock chain and save it to CSV."""
    parser = argparse.ArgumentParser(description='Write a mock call chain to CSV')
    parser.add_argument('symbol', nargs='?', default='AAPL', help='Ticker symbol (default: AAPL)')
    parser.add_argument('--pricing-model', choices=['simple', 'black_scholes'], default='simple')
    parser.add_argument('--out', help='Output path (default: data/<SYMBOL>_options.csv)')
    args = parser.parse_args()

    chain = generate_mock_chain(args.symbol, pricing_model=args.pricing_model)
    output_file = args.out or f"data/{chain.symbol}_options.csv"

    print(f"Generating sample options data for {chain.symbol}...")
    print(f"Stock price: ${chain.spot_price:.2f}")
    print(f"Expiries: {', '.join(chain.expiry_dates)}")

    write_chain_csv(chain, output_file)

    print(f"\n✅ Generated {len(chain.contracts)} contracts")
    print(f"📁 Saved to: {output_file}")
    print(f"\nRun: python3 optimize_leverage.py --csv {output_file} --price {chain.spot_price}")


if __name__ == '__main__':
    main()
