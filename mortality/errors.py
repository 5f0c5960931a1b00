"""Exceptions raised at the pipeline stage boundaries."""


class PipelineError(ValueError):
    """Base class for all pipeline failures."""


class SchemaError(PipelineError):
    """Input table is missing columns or holds unparseable values."""


class AggregationError(PipelineError):
    """Invalid grouping or metric request."""


class PivotConflictError(PipelineError):
    """Two records map to the same wide cell with different values."""


class MissingBaselineError(PipelineError):
    """No "All causes" record for an entity/year."""

    def __init__(self, entity: str, year: int) -> None:
        super().__init__(f"No 'All causes' record for {entity!r} in {year}.")
        self.entity = entity
        self.year = year


class DivisionError(PipelineError):
    """The "All causes" baseline is zero, so the ratio is undefined."""

    def __init__(self, entity: str, year: int) -> None:
        super().__init__(
            f"'All causes' value is zero for {entity!r} in {year}; ratio undefined."
        )
        self.entity = entity
        self.year = year
