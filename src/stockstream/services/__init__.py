"""Pipeline services."""

from stockstream.services.emitter import csv_header, emit_csv
from stockstream.services.pipeline import CycleMode, PipelineDriver, PipelineState
from stockstream.services.worker import SymbolWorker

__all__ = [
    "CycleMode",
    "PipelineDriver",
    "PipelineState",
    "SymbolWorker",
    "csv_header",
    "emit_csv",
]
