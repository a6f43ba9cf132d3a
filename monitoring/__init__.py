"""
Monitoring Package for Keep-Alive Bot

Probe scheduling, HTTP probing, status persistence, offline alerts
and the liveness endpoint.
"""

from monitoring.prober import HTTPProber, ProbeResult, is_success_status
from monitoring.status import StatusChange, StatusUpdater
from monitoring.alerts import AlertDispatcher, NotificationChannel, format_offline_alert
from monitoring.scheduler import Scheduler, is_due
from monitoring.health import HealthServer

__all__ = [
    "HTTPProber",
    "ProbeResult",
    "is_success_status",
    "StatusChange",
    "StatusUpdater",
    "AlertDispatcher",
    "NotificationChannel",
    "format_offline_alert",
    "Scheduler",
    "is_due",
    "HealthServer",
]
