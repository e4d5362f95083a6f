# noqa: D104 - package initialization
from .logging import configure_structured_logging, init_request_context  # noqa: F401
from .metrics import (  # noqa: F401
    init_request_metrics,
    metrics_blueprint,
    record_ai_request,
    record_stats_fallback,
)
from .tracing import init_tracing  # noqa: F401
