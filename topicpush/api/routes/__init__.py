from . import health, jobs, subscriptions

__all__ = ["health", "jobs", "subscriptions"]
