"""Boxing bout analysis package."""

__all__ = [
    "cli",
    "config",
    "constants",
    "exceptions",
    "ingestion",
    "normalization",
    "features",
    "models",
    "evaluation",
    "analysis",
    "reporting",
    "ops",
    "storage",
    "runtime",
]

__version__ = "0.1.0"
