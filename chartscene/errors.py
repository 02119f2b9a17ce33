from __future__ import annotations


class ChartError(ValueError):
    """Base class for failures of one render cycle."""


class MissingCategoricalData(ChartError):
    """Payload has no usable category column or value column."""


class NormalizationError(ChartError):
    """A measure could not be coerced to a finite number."""


class DomainError(ChartError):
    """A scale was queried outside of the domain it was built for."""


class UnknownChartType(ChartError):
    """Chart-type selector is not one of the supported chart types."""
