from backend.engine.scheduler.scheduler import ManualScheduler, RealtimeScheduler, Scheduler

__all__ = ["ManualScheduler", "RealtimeScheduler", "Scheduler"]
