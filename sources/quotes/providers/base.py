"""
Base provider interface for stock quote sources.

All quote providers must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class QuoteDataProvider(ABC):
    """Abstract base class for quote data providers."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key
        self.name = self.__class__.__name__

    @abstractmethod
    def get_quote(self, symbol: str) -> Dict:
        """
        Get the latest price for a symbol.

        Args:
            symbol: Ticker symbol, index symbols keep their '^' prefix

        Returns:
            Dict with keys: symbol, price, reference_price, volume.
            reference_price is None when the service does not report a
            prior close.

        Raises:
            RateLimitError, DataNotFoundError, ProviderError
        """
        pass

    @abstractmethod
    def get_price_history(self, symbol: str, range_: str = "5d") -> List[float]:
        """
        Get daily closes over a range, oldest first, with gaps removed.

        Args:
            symbol: Ticker symbol
            range_: Range string understood by the service (e.g. '5d', '1mo')
        """
        pass

    @abstractmethod
    def get_company_name(self, symbol: str) -> Optional[str]:
        """Get the company's long name, or None if unavailable."""
        pass


class RateLimitError(Exception):
    """Raised when API rate limit is exceeded."""
    pass


class DataNotFoundError(Exception):
    """Raised when the service has no usable data for a symbol."""
    pass


class ProviderError(Exception):
    """Base exception for provider-specific errors."""
    pass
