import logging
from typing import Optional, Sequence

from app.safety_plan.errors import PlanLockedError, PlanShapeError
from app.safety_plan.export import ExportResult, PlanExporter
from app.safety_plan.schemas import PairedEntry, SafetyPlan, SectionKey, SimpleEntry
from app.safety_plan.templates import SECTION_TEMPLATES, SectionTemplate

logger = logging.getLogger(__name__)


class SafetyPlanWizard:
    """
    In-progress plan plus a step cursor.

    Steps are 1-based, one per section template. Entry text is edited in place;
    entries are never added or removed. Once `finish()` is called the plan is locked.
    """

    def __init__(
        self,
        plan: Optional[SafetyPlan] = None,
        templates: Sequence[SectionTemplate] = SECTION_TEMPLATES,
    ):
        self.plan = plan if plan is not None else SafetyPlan.seeded()
        self.templates = tuple(templates)
        self.current_step = 1
        self.locked = False

    # ----------------------------- navigation -------------------------------

    @property
    def step_count(self) -> int:
        return len(self.templates)

    @property
    def current_template(self) -> SectionTemplate:
        return self.templates[self.current_step - 1]

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 1

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.step_count

    @property
    def progress(self) -> float:
        return self.current_step / self.step_count

    def advance(self) -> int:
        self.current_step = min(self.step_count, self.current_step + 1)
        return self.current_step

    def retreat(self) -> int:
        self.current_step = max(1, self.current_step - 1)
        return self.current_step

    # ----------------------------- editing ----------------------------------

    def _check_unlocked(self) -> None:
        if self.locked:
            raise PlanLockedError("The plan has been exported and can no longer be edited.")

    def set_text(self, section: SectionKey, index: int, text: str) -> None:
        """Replace the text of a single-line entry."""
        self._check_unlocked()
        entry = self.plan.entry(section, index)
        if not isinstance(entry, SimpleEntry):
            raise PlanShapeError(f"Section '{SectionKey(section).value}' holds paired entries; use set_pair")
        entry.update(text)

    def set_pair(
        self,
        section: SectionKey,
        index: int,
        primary: Optional[str] = None,
        secondary: Optional[str] = None,
    ) -> None:
        """Update the name and/or contact detail of a paired entry. None leaves a field as it is."""
        self._check_unlocked()
        entry = self.plan.entry(section, index)
        if not isinstance(entry, PairedEntry):
            raise PlanShapeError(f"Section '{SectionKey(section).value}' holds single-line entries; use set_text")
        entry.update_pair(primary=primary, secondary=secondary)

    # ----------------------------- completion -------------------------------

    def finish(self, exporter: PlanExporter) -> ExportResult:
        """Lock the plan and export it. Export failures propagate as ExportError."""
        self.locked = True
        logger.info(f"Plan finished at step {self.current_step}/{self.step_count}; exporting")
        return exporter.export(self.plan)
