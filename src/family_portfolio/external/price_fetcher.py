"""Quote lookups via yfinance.

Failures never propagate: a symbol that cannot be priced yields None, and the
accounting engine values it at zero until a later refresh succeeds.
"""

import logging
from decimal import Decimal
from typing import Optional

import yfinance as yf

logger = logging.getLogger(__name__)

PRICE_QUANTUM = Decimal("0.0001")


class PriceFetcher:
    """Fetches last prices and display names from Yahoo Finance."""

    @staticmethod
    def _ticker(symbol: str):
        return yf.Ticker(symbol.strip().upper())

    @staticmethod
    def fetch_price(symbol: str) -> Optional[Decimal]:
        """Latest price for ``symbol``, or None when Yahoo has nothing usable."""
        ticker = PriceFetcher._ticker(symbol)
        try:
            price = getattr(ticker.fast_info, "last_price", None)
            if price is not None and price > 0:
                return Decimal(str(price)).quantize(PRICE_QUANTUM)
        except Exception as exc:  # yfinance raises a wide range of errors
            logger.debug("fast_info lookup failed for %s: %s", symbol, exc)

        try:
            hist = ticker.history(period="5d")
            if not hist.empty:
                return Decimal(str(hist["Close"].iloc[-1])).quantize(PRICE_QUANTUM)
        except Exception as exc:
            logger.debug("history lookup failed for %s: %s", symbol, exc)

        logger.warning("No price available for %s", symbol)
        return None

    @staticmethod
    def fetch_name(symbol: str) -> Optional[str]:
        """Short (or long) company name, used when a security is added without one."""
        try:
            info = PriceFetcher._ticker(symbol).info or {}
        except Exception as exc:
            logger.warning("Name lookup failed for %s: %s", symbol, exc)
            return None
        return info.get("shortName") or info.get("longName")

    @staticmethod
    def fetch_batch(symbols: list[str]) -> dict[str, Optional[Decimal]]:
        """Fetch prices for multiple symbols; unpriced symbols map to None."""
        return {symbol: PriceFetcher.fetch_price(symbol) for symbol in symbols}
