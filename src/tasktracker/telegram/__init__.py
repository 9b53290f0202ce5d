from tasktracker.telegram.bot import TaskTrackerBot

__all__ = ["TaskTrackerBot"]
