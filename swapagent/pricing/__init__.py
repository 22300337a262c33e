"""
Pricing and token metadata for SwapAgent.
"""

from swapagent.pricing.cache import MISSING, CacheEntry, TTLCache
from swapagent.pricing.metadata import PriceRecord, TokenMeta, TokenMetadataService
from swapagent.pricing.service import PricingService

__all__ = [
    "MISSING",
    "CacheEntry",
    "TTLCache",
    "PriceRecord",
    "TokenMeta",
    "TokenMetadataService",
    "PricingService",
]
