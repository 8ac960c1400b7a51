"""
Go dependency cache restore and save.
"""

from .restore import DirectoryCacheTrigger
from .utils import is_cache_feature_available

__all__ = ["DirectoryCacheTrigger", "is_cache_feature_available"]
