import os

from celery import Celery
from dotenv import load_dotenv

load_dotenv()

celery_app = Celery(
    "flow-pipeline",
    broker=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
    backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
    include=["flow_pipeline.jobs.tasks.export_summary_task"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    "export-summary": {
        "task": "flow_pipeline.jobs.tasks.export_summary_task.export_summary_task",
        "schedule": float(os.getenv("EXPORT_SUMMARY_INTERVAL_SECONDS", "3600")),
    },
}
