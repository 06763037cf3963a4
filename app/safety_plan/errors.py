class SafetyPlanError(Exception):
    """Base class for safety plan errors."""


class PlanShapeError(SafetyPlanError):
    """A section, entry index or entry format does not match the plan's fixed shape."""


class PlanLockedError(SafetyPlanError):
    """The plan was changed after export had started."""


class ExportError(SafetyPlanError):
    """Saving the snapshot or rendering the document failed."""
