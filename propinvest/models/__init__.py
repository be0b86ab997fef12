"""
Data models package for the property investment normalizer
"""

from .property import CanonicalProperty, PropertyType, TransformationError
from .filters import PropertyFilters, SortOption

__all__ = ['CanonicalProperty', 'PropertyType', 'TransformationError', 'PropertyFilters', 'SortOption']
