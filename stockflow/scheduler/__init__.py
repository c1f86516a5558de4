from stockflow.scheduler.monitor_scheduler import MonitorScheduler, SchedulerConfig

__all__ = [
    "MonitorScheduler",
    "SchedulerConfig",
]
