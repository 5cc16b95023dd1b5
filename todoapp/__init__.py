"""To-do list backend with recurring tasks and hourly overdue reminders."""

__version__ = "0.2.0"
