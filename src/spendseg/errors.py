from __future__ import annotations
from typing import Iterable


class SegmentationError(Exception):
    pass


class DataError(SegmentationError):
    """Input file is unusable: bad values or a failed type coercion."""


class MissingColumnsError(DataError):
    def __init__(self, missing: Iterable[str], path: str | None = None):
        self.missing = sorted(missing)
        where = f" in {path}" if path else ""
        super().__init__(f"missing required column(s){where}: {', '.join(self.missing)}")


class CategoryMismatchError(SegmentationError):
    """Predicted and actual labels do not share one category universe."""
