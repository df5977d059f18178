from .base_task import BaseTask
from .task_models import SummaryTaskContext

__all__ = [
    'BaseTask',
    'SummaryTaskContext',
]
