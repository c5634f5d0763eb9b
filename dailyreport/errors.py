from __future__ import annotations


class ReportError(RuntimeError):
    """Base class for failures raised while building a daily report."""


class MeasurementFailure(ReportError):
    """An image or a run of text could not be measured."""


class EncodingFailure(ReportError):
    """A photo could not be re-encoded for embedding."""


class SerializationFailure(ReportError):
    """The PDF document could not be written out."""
