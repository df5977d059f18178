import sys
import time
import uuid
import os
import threading
from typing import Dict, Optional
from dotenv import load_dotenv
from prometheus_client import (
    CollectorRegistry, Counter, Histogram, Gauge, Info,
    start_http_server
)
from loguru import logger

load_dotenv()

_correlation_context = threading.local()


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for run tracing."""
    return f"run_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from thread-local storage."""
    return getattr(_correlation_context, 'correlation_id', None)


def set_correlation_id(correlation_id: Optional[str]):
    """Set the correlation ID in thread-local storage."""
    _correlation_context.correlation_id = correlation_id


def setup_logger(service_name: str):
    """
    Setup file and console logging for a service.

    Args:
        service_name: Name stamped on every record (e.g. 'flow-pipeline-export-summary').
    """

    def patch_record(record):
        record["extra"]["service"] = service_name
        correlation_id = get_correlation_id()
        if correlation_id:
            record["extra"]["correlation_id"] = correlation_id
        record["extra"]["timestamp"] = time.time()
        return True

    logs_dir = os.environ.get('LOGS_DIR')

    if not logs_dir:
        project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        logs_dir = os.path.join(project_root, "logs")

    try:
        os.makedirs(logs_dir, exist_ok=True)
        if not os.access(logs_dir, os.W_OK):
            raise PermissionError(f"{logs_dir} is not writable")

    except (OSError, PermissionError) as e:
        import tempfile
        fallback_logs_dir = os.path.join(tempfile.gettempdir(), 'flow-pipeline-logs')
        try:
            os.makedirs(fallback_logs_dir, exist_ok=True)
            logs_dir = fallback_logs_dir
            print(f"Warning: Using fallback logs directory {logs_dir} due to permission error: {e}")
        except OSError:
            logs_dir = os.getcwd()
            print(f"Warning: Using current directory for logs due to permission errors. Original error: {e}")

    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()

    logger.remove()

    # JSON lines for log shipping
    try:
        logger.add(
            os.path.join(logs_dir, f"{service_name}.log"),
            rotation="500 MB",
            level=log_level,
            filter=patch_record,
            serialize=True,
            format="{time} | {level} | {extra[service]} | {message} | {extra}"
        )
    except Exception as e:
        print(f"Warning: Could not set up file logging: {e}. Proceeding with console-only logging.")

    console_format = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | <cyan>{extra[service]}</cyan> | {message} | <white>{extra}</white>"

    logger.add(
        sys.stdout,
        format=console_format,
        level=log_level,
        filter=patch_record,
        backtrace=False,
        diagnose=False,
    )

    logger.info(f"Logger configured with level: {log_level}")

    return service_name


_service_registries: Dict[str, "MetricsRegistry"] = {}
_metrics_lock = threading.Lock()


class MetricsRegistry:
    """Prometheus metrics registry for one service"""

    def __init__(self, service_name: str, port: Optional[int] = None):
        self.service_name = service_name
        self.registry = CollectorRegistry()
        self.port = port
        self.server = None

        self._init_common_metrics()

    def _init_common_metrics(self):
        self.service_info = Info(
            'service_info',
            'Service information',
            registry=self.registry
        )
        self.service_info.info({
            'service_name': self.service_name,
            'component': 'flow-pipeline',
        })

        self.service_start_time = Gauge(
            'service_start_time_seconds',
            'Service start time in Unix timestamp',
            registry=self.registry
        )
        self.service_start_time.set_to_current_time()

        self.errors_total = Counter(
            'service_errors_total',
            'Total number of errors by type',
            ['error_type', 'component'],
            registry=self.registry
        )

        # 1=healthy, 0=unhealthy
        self.health_status = Gauge(
            'service_health_status',
            'Service health status (1=healthy, 0=unhealthy)',
            registry=self.registry
        )
        self.health_status.set(1)

    def create_counter(self, name: str, description: str, labelnames: list = None) -> Counter:
        return Counter(
            name, description,
            labelnames or [],
            registry=self.registry
        )

    def create_histogram(self, name: str, description: str, labelnames: list = None,
                         buckets: tuple = None) -> Histogram:
        kwargs = {
            'name': name,
            'documentation': description,
            'labelnames': labelnames or [],
            'registry': self.registry
        }
        if buckets:
            kwargs['buckets'] = buckets
        return Histogram(**kwargs)

    def create_gauge(self, name: str, description: str, labelnames: list = None) -> Gauge:
        return Gauge(
            name, description,
            labelnames or [],
            registry=self.registry
        )

    def start_metrics_server(self, port: Optional[int] = None) -> bool:
        """Start HTTP server for the /metrics endpoint"""
        if self.server is not None:
            logger.warning(f"Metrics server already running for {self.service_name}")
            return True

        target_port = port or self.port or self._get_default_port()

        try:
            self.server = start_http_server(target_port, registry=self.registry)
            self.port = target_port
            logger.info(f"Metrics server started for {self.service_name} on port {target_port}")
            return True

        except OSError as e:
            logger.error(f"Failed to start metrics server for {self.service_name}: {e}")
            return False

    def _get_default_port(self) -> int:
        env_port = os.getenv('METRICS_PORT')
        if env_port:
            try:
                return int(env_port)
            except ValueError:
                logger.warning(f"Invalid METRICS_PORT value: {env_port}, using default")

        return 9310

    def record_error(self, error_type: str, component: str = "unknown"):
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def set_health_status(self, healthy: bool):
        self.health_status.set(1 if healthy else 0)


def setup_metrics(service_name: str, port: Optional[int] = None, start_server: bool = True) -> MetricsRegistry:
    """
    Setup metrics for a service following the same pattern as setup_logger.

    Args:
        service_name: Name of the service (e.g., 'flow-pipeline-export-summary')
        port: Optional port for metrics server
        start_server: Whether to start HTTP server immediately

    Returns:
        MetricsRegistry: Configured metrics registry for the service
    """
    with _metrics_lock:
        if service_name in _service_registries:
            logger.debug(f"Metrics already setup for {service_name}")
            return _service_registries[service_name]

        metrics_registry = MetricsRegistry(service_name, port)
        _service_registries[service_name] = metrics_registry

        if start_server:
            metrics_registry.start_metrics_server()

        logger.info(f"Metrics setup completed for service: {service_name}")
        return metrics_registry


def get_metrics_registry(service_name: str) -> Optional[MetricsRegistry]:
    """Get existing metrics registry for a service"""
    return _service_registries.get(service_name)


DURATION_BUCKETS = (0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0, float('inf'))
