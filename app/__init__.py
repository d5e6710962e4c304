"""Smart College Life Manager dashboard backend.

Normalizes agent responses into the coordinator, study plan and
collaboration view models served to the dashboard.
"""
