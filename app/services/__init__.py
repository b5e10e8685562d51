"""
app/services package marker.
"""

from app.services.metrics_service import DashboardMetrics, KPIResult, MetricsService
from app.services.rapid_entry_service import (
    RapidEntryForm,
    RapidEntryQueue,
    RapidEntryValidationError,
    create_session,
)

__all__ = [
    "DashboardMetrics",
    "KPIResult",
    "MetricsService",
    "RapidEntryForm",
    "RapidEntryQueue",
    "RapidEntryValidationError",
    "create_session",
]
