"""Activity logging package."""

from expensedaddy.audit.logger import (
    DEFAULT_ACTIVITY_LIMIT,
    ActivityLogRecorder,
    configure_logging,
)

__all__ = ["DEFAULT_ACTIVITY_LIMIT", "ActivityLogRecorder", "configure_logging"]
