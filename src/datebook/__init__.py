"""Date-organized local task list with day/week/month/year views."""

__version__ = "0.1.0"
