"""External price sources."""

from .coingecko import CoinGeckoRateSource

__all__ = ["CoinGeckoRateSource"]
