from ucjs_loader.integrations.scheduler.abc import Scheduler
from ucjs_loader.integrations.scheduler.queue import QueueScheduler

__all__ = ["QueueScheduler", "Scheduler"]
