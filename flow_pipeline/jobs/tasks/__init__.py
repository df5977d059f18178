from .export_summary_task import (
    export_summary_task,
    ExportSummaryTask
)

__all__ = [
    'export_summary_task',
    'ExportSummaryTask',
]
