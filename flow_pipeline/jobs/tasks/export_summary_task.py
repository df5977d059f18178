import time
from typing import Optional

from celery_singleton import Singleton
from loguru import logger

from flow_pipeline import DURATION_BUCKETS, MetricsRegistry, get_metrics_registry
from flow_pipeline.jobs.base import BaseTask, SummaryTaskContext
from flow_pipeline.jobs.celery_app import celery_app
from flow_pipeline.storage.client import ClientFactory, get_connection_params
from flow_pipeline.storage.constants import TOP_N
from flow_pipeline.storage.repositories.account_repository import AccountRepository
from flow_pipeline.storage.repositories.address_label_repository import AddressLabelRepository
from flow_pipeline.storage.repositories.transfer_repository import TransferRepository
from flow_pipeline.summary.composer import SummaryComposer
from flow_pipeline.summary.writer import write_summary


def _export_metrics(metrics_registry: MetricsRegistry):
    if not hasattr(metrics_registry, "summary_exports_total"):
        metrics_registry.summary_exports_total = metrics_registry.create_counter(
            "summary_exports_total", "Completed summary exports"
        )
        metrics_registry.summary_export_duration = metrics_registry.create_histogram(
            "summary_export_duration_seconds", "Summary export duration", buckets=DURATION_BUCKETS
        )
        metrics_registry.summary_rows = metrics_registry.create_gauge(
            "summary_rows", "Rows in the last exported summary", ["section"]
        )
        metrics_registry.summary_total_transfers = metrics_registry.create_gauge(
            "summary_total_transfers", "Total transfers reported by the ledger"
        )
    return metrics_registry


class ExportSummaryTask(BaseTask, Singleton):

    def execute_task(self, context: SummaryTaskContext):
        started = time.monotonic()
        client_factory = ClientFactory(get_connection_params())

        with client_factory.client_context() as client:
            composer = SummaryComposer(
                transfer_repository=TransferRepository(client),
                account_repository=AccountRepository(client),
                label_repository=AddressLabelRepository(context.labels_path),
                top_n=context.top_n,
                transfer_page_size=context.transfer_page_size,
                account_page_size=context.account_page_size,
                balance_batch_size=context.balance_batch_size,
            )
            document = composer.compose()

        # Written only after every query succeeded.
        write_summary(document, context.output_path)

        logger.info(
            f"Exported: {len(document.top_7d)} addresses (7d), "
            f"{len(document.top_30d)} (30d), {document.total_transfers} total transfers"
        )

        metrics_registry = get_metrics_registry(context.service_name)
        if metrics_registry is not None:
            _export_metrics(metrics_registry)
            metrics_registry.summary_exports_total.inc()
            metrics_registry.summary_export_duration.observe(time.monotonic() - started)
            metrics_registry.summary_rows.labels(section="top_7d").set(len(document.top_7d))
            metrics_registry.summary_rows.labels(section="top_30d").set(len(document.top_30d))
            metrics_registry.summary_rows.labels(section="top_holders").set(len(document.top_holders))
            metrics_registry.summary_total_transfers.set(document.total_transfers)

        return {
            "status": "success",
            "output_path": str(context.output_path),
            "top_7d": len(document.top_7d),
            "top_30d": len(document.top_30d),
            "top_holders": len(document.top_holders),
            "total_transfers": document.total_transfers,
            "synced_at": document.synced_at,
        }


@celery_app.task(
    bind=True,
    base=ExportSummaryTask,
    time_limit=3600,
    soft_time_limit=3500
)
def export_summary_task(
    self,
    output_path: Optional[str] = None,
    labels_path: Optional[str] = None,
    top_n: int = TOP_N
):
    context = SummaryTaskContext(top_n=top_n)
    if output_path:
        context.output_path = output_path
    if labels_path:
        context.labels_path = labels_path

    return self.execute(context)
