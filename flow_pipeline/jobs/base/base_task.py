import time

from celery import Task
from loguru import logger

from flow_pipeline import generate_correlation_id, get_metrics_registry, set_correlation_id
from flow_pipeline.jobs.base.task_models import SummaryTaskContext


class BaseTask(Task):
    """
    Celery task base that runs ``execute_task`` under a correlation id.

    Failures are recorded on the service metrics registry (when one is set
    up) and re-raised unchanged.
    """

    def execute(self, context: SummaryTaskContext):
        correlation_id = context.correlation_id or generate_correlation_id()
        context.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        task_name = self.__class__.__name__
        metrics_registry = get_metrics_registry(context.service_name)
        started = time.monotonic()
        logger.info(f"Starting {task_name}")

        try:
            result = self.execute_task(context)
            logger.success(f"{task_name} completed in {time.monotonic() - started:.2f}s")
            if metrics_registry is not None:
                metrics_registry.set_health_status(True)
            return result
        except Exception as e:
            logger.bind(task=task_name, error_type=type(e).__name__).error(f"{task_name} failed: {e}")
            if metrics_registry is not None:
                metrics_registry.record_error(type(e).__name__, component=task_name)
                metrics_registry.set_health_status(False)
            raise
        finally:
            set_correlation_id(None)

    def execute_task(self, context: SummaryTaskContext):
        raise NotImplementedError
