"""Scheduling domain errors"""


class SchedulingError(ValueError):
    """Base class for validation failures in the scheduling calculators"""


class InvalidRuleError(SchedulingError):
    """Raised when a recurrence rule cannot be expanded"""


class InvalidIntervalError(SchedulingError):
    """Raised when an assignment interval or coverage window is malformed"""
