"""Filtering and orchestration on top of the ingest layer."""

from .filters import InstrumentFilter, matches
from .pipeline import InspectionPipeline, PipelineOptions
from .report import format_outcome, outcomes_to_frame

__all__ = [
    "InstrumentFilter",
    "matches",
    "InspectionPipeline",
    "PipelineOptions",
    "format_outcome",
    "outcomes_to_frame",
]
