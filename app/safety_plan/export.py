"""
app/safety_plan/export.py
~~~~~~~~~~~~~~~~~~~~~~~~~

Finishing a plan: lay out and render the PDF, then save the JSON snapshot to
the local store. Nothing is saved if the document cannot be built.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from pydantic import BaseModel

from app.core.settings import Settings, get_settings
from app.db.session import SessionFactory, get_session_context
from app.safety_plan.crud import get_plan_snapshot, save_plan_snapshot
from app.safety_plan.errors import ExportError, SafetyPlanError
from app.safety_plan.layout import DEFAULT_METRICS, LayoutMetrics, layout_plan
from app.safety_plan.pdf import render_pdf
from app.safety_plan.schemas import PlanSnapshot, SafetyPlan

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z, e.g. 2024-05-01T09:30:00.000Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def export_file_name(moment: datetime) -> str:
    return f"safety-plan-{moment.astimezone(timezone.utc).date().isoformat()}.pdf"


class ExportResult(BaseModel):
    file_name: str
    pdf_bytes: bytes
    snapshot: PlanSnapshot

    def write_to(self, directory: Union[str, Path]) -> Path:
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / self.file_name
        path.write_bytes(self.pdf_bytes)
        logger.info(f"Wrote {path} ({len(self.pdf_bytes)} bytes)")
        return path


class PlanExporter:
    """Saves the snapshot and renders the document for a finished plan."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: Optional[SessionFactory] = None,
        clock: Clock = utc_now,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ):
        self.settings = settings or get_settings()
        self.session_factory = session_factory or get_session_context
        self.clock = clock
        self.metrics = metrics

    def render(self, plan: SafetyPlan) -> bytes:
        layout = layout_plan(
            plan,
            title=self.settings.DOCUMENT_TITLE,
            footer=self.settings.DOCUMENT_FOOTER,
            metrics=self.metrics,
        )
        return render_pdf(layout, title=self.settings.DOCUMENT_TITLE)

    def export(self, plan: SafetyPlan) -> ExportResult:
        # Work on a copy so edits made after this point cannot reach the document.
        frozen_plan = plan.model_copy(deep=True)
        moment = self.clock()
        snapshot = PlanSnapshot(timestamp=iso_timestamp(moment), data=frozen_plan)
        file_name = export_file_name(moment)

        logger.info(f"Exporting safety plan as '{file_name}'")
        try:
            pdf_bytes = self.render(frozen_plan)
            with self.session_factory() as db:
                save_plan_snapshot(db, self.settings.PLAN_STORAGE_KEY, snapshot)
        except SafetyPlanError:
            raise
        except Exception as exc:
            logger.error(f"Export of '{file_name}' failed: {exc}", exc_info=True)
            raise ExportError(f"Could not export the safety plan: {exc}") from exc

        logger.info(f"Export of '{file_name}' finished")
        return ExportResult(file_name=file_name, pdf_bytes=pdf_bytes, snapshot=snapshot)

    def load_last(self) -> Optional[PlanSnapshot]:
        """The most recently saved snapshot, if any."""
        with self.session_factory() as db:
            return get_plan_snapshot(db, self.settings.PLAN_STORAGE_KEY)
