from .filters import apply_filters, filter_and_sort, matches_filters, sort_properties

__all__ = ["apply_filters", "filter_and_sort", "matches_filters", "sort_properties"]
