"""
Org Chart Errors
================

Exception hierarchy for the org chart engine. None of these are fatal to a
chart session: each is recovered at the boundary of the operation that
detected it and surfaced as a notice or an HTTP error body.

Version: 0.1.0
"""


class OrgChartError(Exception):
    """Base error for the org chart engine."""


class DataError(OrgChartError):
    """An organization record cannot be parsed or assigned a position."""

    def __init__(self, message: str, record_id: str | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class GraphValidationError(OrgChartError):
    """A graph mutation was rejected because it would break an invariant."""


class ExportError(OrgChartError):
    """The chart could not be exported. The graph is untouched and retry is safe."""
