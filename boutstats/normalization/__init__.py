"""Schema validation and type coercion for raw bout tables."""

from boutstats.normalization.schema import (
    coerce_types,
    validate_columns,
)

__all__ = ["coerce_types", "validate_columns"]
