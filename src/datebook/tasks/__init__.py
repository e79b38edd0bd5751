"""
Task subsystem.

Components:
- task_models.py: data structures (Task, ViewMode, ViewSnapshot, ...)
- dates.py: date keys, view windows, calendar arithmetic, labels
- task_store.py: date-key -> task list mapping + persistence codec
- view_scheduler.py: view mode / reference date state machine and filtering
"""
