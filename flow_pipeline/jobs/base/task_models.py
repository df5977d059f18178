import os
from dataclasses import dataclass, field
from typing import Optional

from flow_pipeline.storage.constants import PageSizes, TOP_N


@dataclass
class SummaryTaskContext:
    output_path: str = field(default_factory=lambda: os.getenv("OUTPUT_PATH", "docs/summary.json"))
    labels_path: str = field(default_factory=lambda: os.getenv("LABELS_PATH", "data/labels.json"))
    top_n: int = TOP_N
    transfer_page_size: int = PageSizes.TRANSFERS
    account_page_size: int = PageSizes.ACCOUNTS
    balance_batch_size: int = PageSizes.ADDRESS_BATCH
    service_name: str = "flow-pipeline-export-summary"
    correlation_id: Optional[str] = None


__all__ = [
    'SummaryTaskContext',
]
