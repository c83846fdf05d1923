"""SQL syntax trees, result sets and query plan executors."""

__version__ = "0.1.0"

__all__ = [
    "aggregation",
    "ast",
    "ddl",
    "join",
    "mutation",
    "query",
    "results",
    "source",
]