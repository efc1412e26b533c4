"""Currency catalog exports."""

from .models import DEFAULT_CURRENCIES, Currency

__all__ = ["Currency", "DEFAULT_CURRENCIES"]
