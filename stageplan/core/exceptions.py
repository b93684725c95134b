class StagePlanError(Exception):
    """Base exception for the stage forecasting service."""

    pass


class ScheduleIntegrityError(StagePlanError):
    """Raised when template, plan or execution data cannot produce a schedule.

    Covers missing durations, missing execution records and stage templates
    whose sequence order contradicts their dependencies. Never retried.
    """

    pass
