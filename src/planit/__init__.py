"""PlanIt: a small always-on-top widget for today's Notion tasks."""

__version__ = "0.1.0"
