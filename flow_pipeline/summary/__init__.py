from flow_pipeline.summary.composer import SummaryComposer, format_synced_at
from flow_pipeline.summary.models import FlowRow, HolderRow, SummaryDocument
from flow_pipeline.summary.writer import write_summary

__all__ = [
    "SummaryComposer",
    "format_synced_at",
    "FlowRow",
    "HolderRow",
    "SummaryDocument",
    "write_summary",
]
