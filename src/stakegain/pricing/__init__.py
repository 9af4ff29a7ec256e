"""Historical price lookup over candle series."""

from stakegain.pricing.series import CandleSeries

__all__ = ["CandleSeries"]
