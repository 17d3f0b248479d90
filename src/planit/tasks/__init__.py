"""
Task presentation subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, DataSource)
- urgency.py: deadline -> (tier, remaining-time string)
- presenter.py: display rows + optimistic completion tracking
- task_scheduler.py: countdown ticker that re-derives rows on a 1s / 60s cadence
"""
