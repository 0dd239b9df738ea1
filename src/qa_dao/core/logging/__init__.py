# src/qa_dao/core/logging/
# ├─ __init__.py            # public API
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # CorrelationIdFilter, RedactFilter (+ contextvar helpers)
# └─ handlers.py            # handler config factories (console/file/error)

from .builder import setup_logging, make_dict_config
from .filters import (
    CorrelationIdFilter,
    RedactFilter,
    set_correlation_id,
    reset_correlation_id,
    get_correlation_id,
)

__all__ = [
    "setup_logging",
    "make_dict_config",
    "CorrelationIdFilter",
    "RedactFilter",
    "set_correlation_id",
    "reset_correlation_id",
    "get_correlation_id",
]
