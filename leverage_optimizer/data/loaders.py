"""Data loaders for option chains."""

import csv
from datetime import datetime
from pathlib import Path
from typing import List

from ..models.option import OptionContract
from ..models.quote import Quote
from ..utils.error_handling import DataValidationError, validate_contract_data
from ..utils.logging_config import get_logger

logger = get_logger("loaders")

CSV_FIELDNAMES = ['id', 'symbol', 'strike', 'expiry', 'premium', 'delta', 'type']


def contract_id(symbol: str, expiry: str, kind: str, strike: float) -> str:
    """Build a contract identifier like AAPL20251115C170."""
    return f"{symbol.upper()}{expiry.replace('-', '')}{kind[0].upper()}{strike:g}"


def load_contracts_from_csv(csv_path: str | Path) -> List[OptionContract]:
    """Load option contracts from CSV file.

    Expected CSV format:
        id,symbol,strike,expiry,premium,delta,type

    `premium` and `delta` are per share. Either `id` or `symbol` must be
    filled in for each row; a missing id is built from the symbol.

    Args:
        csv_path: Path to CSV file

    Returns:
        List of OptionContract objects

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        DataValidationError: If CSV has missing headers or no valid rows
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        logger.error("CSV file not found: %s", csv_path)
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info("Loading option contracts from CSV: %s", csv_path)

    contracts = []
    required_fields = {'strike', 'expiry', 'premium', 'delta', 'type'}

    try:
        with open(csv_path, 'r', newline='') as f:
            reader = csv.DictReader(f)

            fieldnames = set(reader.fieldnames or [])
            if not required_fields.issubset(fieldnames):
                missing = required_fields - fieldnames
                logger.error("CSV missing required fields: %s", missing)
                raise DataValidationError(f"CSV missing required fields: {sorted(missing)}")

            if not fieldnames & {'id', 'symbol'}:
                raise DataValidationError("CSV needs an 'id' or 'symbol' column")

            skipped_rows = 0
            total_rows = 0
            for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
                total_rows += 1
                try:
                    contracts.append(_parse_contract_row(row))
                except (ValueError, KeyError) as e:
                    logger.warning(
                        "Skipping row %d in %s due to error: %s",
                        row_num, csv_path.name, e
                    )
                    skipped_rows += 1

            if skipped_rows > 0:
                logger.warning(
                    "Skipped %d invalid rows out of %d total rows in %s",
                    skipped_rows, total_rows, csv_path.name
                )

    except DataValidationError:
        raise
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        logger.error("Error reading CSV file %s: %s", csv_path, e)
        raise DataValidationError(f"Failed to read CSV file {csv_path}: {e}") from e

    if not contracts:
        logger.error("No valid contracts found in %s", csv_path)
        raise DataValidationError(f"No valid contracts found in {csv_path}")

    logger.info("Successfully loaded %d contracts from %s", len(contracts), csv_path.name)
    return contracts


def _parse_expiry(value: str) -> str:
    """Normalise YYYY-MM-DD or MM/DD/YYYY to an ISO date string."""
    value = value.strip()
    for fmt in ('%Y-%m-%d', '%m/%d/%Y'):
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    raise ValueError(f"Invalid expiry date format: {value}")


def _parse_contract_row(row: dict) -> OptionContract:
    """Parse a single CSV row into an OptionContract.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    data = {
        'strike': float(row['strike']),
        'expiry': _parse_expiry(row['expiry']),
        'premium': float(row['premium']),
        'delta': float(row['delta']),
        'type': row['type'].strip().lower(),
    }

    is_valid, error = validate_contract_data(data)
    if not is_valid:
        raise ValueError(error)

    identifier = (row.get('id') or '').strip()
    if not identifier:
        symbol = (row.get('symbol') or '').strip()
        if not symbol:
            raise ValueError("Row has neither id nor symbol")
        identifier = contract_id(symbol, data['expiry'], data['type'], data['strike'])

    return OptionContract(
        id=identifier,
        strike=data['strike'],
        expiry=data['expiry'],
        premium_per_share=data['premium'],
        delta_per_share=data['delta'],
        kind=data['type'],  # type: ignore
    )


class OptionsChainData:
    """Container for one refresh of chain data: a quote plus its contracts."""

    def __init__(self, quote: Quote, contracts: List[OptionContract],
                 expiry_dates: List[str] | None = None):
        """Initialize option chain data.

        Args:
            quote: Current underlying quote
            contracts: List of OptionContract objects
            expiry_dates: Optional list of available expiries. Defaults to the
                sorted distinct expiries of the contracts.
        """
        self.quote = quote
        self.contracts = contracts
        if expiry_dates is None:
            expiry_dates = sorted({c.expiry for c in contracts})
        self.expiry_dates = expiry_dates

    @property
    def symbol(self) -> str:
        """Underlying ticker symbol."""
        return self.quote.symbol

    @property
    def spot_price(self) -> float:
        return self.quote.price

    def contracts_for_expiry(self, expiry: str) -> List[OptionContract]:
        """Contracts expiring on the given date."""
        return [c for c in self.contracts if c.expiry == expiry]

    def __repr__(self) -> str:
        return (f"OptionsChainData({self.symbol} ${self.spot_price:.2f}, "
                f"{len(self.contracts)} contracts, {len(self.expiry_dates)} expiries)")
