"""Error types raised across the analysis pipeline."""

from typing import Optional


class BoutStatsError(Exception):
    pass


class SchemaError(BoutStatsError, ValueError):
    """Input file is missing required columns or holds an unparsable row."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        row: Optional[int] = None,
        value: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.row = row
        self.value = value


class ConfigurationError(BoutStatsError, ValueError):
    pass


class RangeExhaustion(BoutStatsError):
    """Fewer records of a class remain than a downstream step requires."""

    def __init__(self, class_label: str, required: int, available: int) -> None:
        super().__init__(
            f"class {class_label!r} needs {required} records, only {available} available"
        )
        self.class_label = class_label
        self.required = required
        self.available = available


class FitFailure(BoutStatsError):
    """A classifier or regression fit could not be completed."""

    def __init__(
        self,
        reason: str,
        fold: Optional[int] = None,
        config: Optional[str] = None,
    ) -> None:
        where = []
        if fold is not None:
            where.append(f"fold={fold}")
        if config is not None:
            where.append(f"config={config}")
        prefix = f"[{' '.join(where)}] " if where else ""
        super().__init__(f"{prefix}{reason}")
        self.reason = reason
        self.fold = fold
        self.config = config
