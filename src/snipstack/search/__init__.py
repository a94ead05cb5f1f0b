"""SnipStack search — query compilation, filtering and sorting."""

from snipstack.search.debounce import Debouncer
from snipstack.search.engine import VIEWS, apply, matches
from snipstack.search.query import SORT_ORDERS, FilterSpec, QueryCompiler
from snipstack.search.terms import STOP_WORDS, significant_terms

__all__ = [
    "SORT_ORDERS",
    "STOP_WORDS",
    "VIEWS",
    "Debouncer",
    "FilterSpec",
    "QueryCompiler",
    "apply",
    "matches",
    "significant_terms",
]
