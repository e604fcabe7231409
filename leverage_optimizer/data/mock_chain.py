"""Mock option chain provider.

Stands in for a market data feed: builds a call chain for a symbol from a
fixed price table, monthly expiries and one of two pricing models.

    simple         piecewise moneyness delta, intrinsic + time-value premium
    black_scholes  Black-Scholes call delta and price with a volatility smile
"""

import csv
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Tuple

import numpy as np
from scipy.stats import norm

from ..models.option import OptionContract
from ..models.quote import Quote
from ..utils.error_handling import ConfigurationError
from ..utils.logging_config import get_logger
from .loaders import CSV_FIELDNAMES, OptionsChainData, contract_id

logger = get_logger("mock_chain")

MOCK_STOCK_PRICES = {
    'AAPL': 175.5,
    'MSFT': 415.2,
    'GOOGL': 142.3,
    'TSLA': 242.8,
    'NVDA': 875.4,
    'AMZN': 178.65,
    'META': 485.3,
}
DEFAULT_STOCK_PRICE = 100.0

PRICING_MODELS = ('simple', 'black_scholes')

RISK_FREE_RATE = 0.045  # 4.5%
ATM_IV = 0.22


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def monthly_expiries(today: date, count: int = 6) -> List[str]:
    """The 15th of each of the next `count` months, as ISO strings.

    Stands in for standard monthly expiries (third Friday, approximated).
    """
    expiries = []
    for offset in range(1, count + 1):
        month_index = today.month - 1 + offset
        year = today.year + month_index // 12
        month = month_index % 12 + 1
        expiries.append(date(year, month, 15).isoformat())
    return expiries


def strike_ladder(stock_price: float, steps: int = 4) -> List[float]:
    """Strikes around spot, spaced roughly 5% of the stock price apart."""
    interval = max(1, _round_half_up(stock_price * 0.05))
    strikes = []
    for i in range(-steps, steps + 1):
        strike = _round_half_up((stock_price + i * interval) / interval) * interval
        strikes.append(float(strike))
    return strikes


def days_to_expiry(expiry: str, today: date) -> int:
    """Calendar days until expiry, never less than 1."""
    days = (date.fromisoformat(expiry) - today).days
    return max(1, days)


def simple_option_metrics(stock_price: float, strike: float, days: int) -> Tuple[float, float]:
    """Approximate call delta and per-share premium without a volatility input.

    Args:
        stock_price: Current underlying price
        strike: Strike price
        days: Days to expiry

    Returns:
        Tuple of (delta, premium); delta clamped to [0.05, 0.95],
        premium floored at 0.10
    """
    moneyness = stock_price / strike
    time_value = math.sqrt(days / 365)

    if moneyness > 1.1:
        # Deep ITM
        delta = 0.8 + (moneyness - 1.1) * 0.5
    elif moneyness > 1.0:
        # Slightly ITM
        delta = 0.5 + (moneyness - 1.0) * 3
    elif moneyness > 0.9:
        # Slightly OTM
        delta = 0.2 + (moneyness - 0.9) * 3
    else:
        # Deep OTM
        delta = 0.1 + moneyness * 0.1

    delta = max(0.05, min(0.95, delta))

    intrinsic = max(0.0, stock_price - strike)
    extrinsic = stock_price * 0.02 * time_value * (1 - abs(moneyness - 1))
    premium = intrinsic + extrinsic

    return delta, max(0.1, premium)


def black_scholes_call_metrics(
    stock_price: float,
    strikes: List[float],
    days: int,
    rate: float = RISK_FREE_RATE,
    atm_iv: float = ATM_IV,
) -> Tuple[np.ndarray, np.ndarray]:
    """Black-Scholes call deltas and prices for a strike ladder.

    IV rises with distance from spot (simple smile), as in the sample data
    generator.

    Returns:
        Tuple of (deltas, premiums) arrays aligned with `strikes`
    """
    k = np.asarray(strikes, dtype=float)
    t = days / 365.0
    vol = atm_iv + np.abs(k - stock_price) / stock_price * 0.3

    d1 = (np.log(stock_price / k) + (rate + 0.5 * vol ** 2) * t) / (vol * np.sqrt(t))
    d2 = d1 - vol * np.sqrt(t)

    deltas = norm.cdf(d1)
    prices = stock_price * norm.cdf(d1) - k * np.exp(-rate * t) * norm.cdf(d2)

    return deltas, np.maximum(prices, 0.01)


def generate_mock_chain(
    symbol: str,
    today: date | None = None,
    pricing_model: str = 'simple',
    expiry_count: int = 6,
) -> OptionsChainData:
    """Build a call-only option chain for a symbol.

    Args:
        symbol: Ticker symbol (case-insensitive)
        today: Reference date for expiries (defaults to today)
        pricing_model: 'simple' or 'black_scholes'
        expiry_count: Number of monthly expiries

    Returns:
        OptionsChainData with nine strikes per expiry

    Raises:
        ConfigurationError: If the pricing model is unknown
    """
    if pricing_model not in PRICING_MODELS:
        raise ConfigurationError(
            f"Unknown pricing model '{pricing_model}' (expected one of {PRICING_MODELS})"
        )

    symbol = symbol.strip().upper()
    today = today or date.today()
    stock_price = MOCK_STOCK_PRICES.get(symbol, DEFAULT_STOCK_PRICE)

    logger.info("[MOCK] Generating %s chain for %s @ %.2f", pricing_model, symbol, stock_price)

    quote = Quote(symbol=symbol, price=stock_price, as_of=datetime.now(timezone.utc))
    expiries = monthly_expiries(today, expiry_count)
    strikes = strike_ladder(stock_price)

    contracts = []
    for expiry in expiries:
        days = days_to_expiry(expiry, today)

        if pricing_model == 'black_scholes':
            deltas, premiums = black_scholes_call_metrics(stock_price, strikes, days)
            metrics = [(float(d), float(p)) for d, p in zip(deltas, premiums)]
        else:
            metrics = [simple_option_metrics(stock_price, k, days) for k in strikes]

        for strike, (delta, premium) in zip(strikes, metrics):
            contracts.append(OptionContract(
                id=contract_id(symbol, expiry, 'call', strike),
                strike=strike,
                expiry=expiry,
                premium_per_share=premium,
                delta_per_share=delta,
                kind='call',
            ))

    logger.debug("Generated %d contracts across %d expiries", len(contracts), len(expiries))
    return OptionsChainData(quote=quote, contracts=contracts, expiry_dates=expiries)


def write_chain_csv(chain: OptionsChainData, csv_path: str | Path) -> Path:
    """Write a chain in the format read by load_contracts_from_csv."""
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    with open(csv_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        writer.writeheader()
        for contract in chain.contracts:
            writer.writerow({
                'id': contract.id,
                'symbol': chain.symbol,
                'strike': f"{contract.strike:g}",
                'expiry': contract.expiry,
                'premium': f"{contract.premium_per_share:.4f}",
                'delta': f"{contract.delta_per_share:.4f}",
                'type': contract.kind,
            })

    logger.info("Wrote %d contracts to %s", len(chain.contracts), csv_path)
    return csv_path
