"""Data layer: models, result sink and quote sources."""

from stockstream.data.models import ResultRecord, TimeRange
from stockstream.data.sink import ResultSink

__all__ = ["ResultRecord", "ResultSink", "TimeRange"]
