import json
from datetime import datetime, timedelta, timezone

import pytest

from app.safety_plan.errors import ExportError, PlanShapeError
from app.safety_plan.export import PlanExporter, export_file_name, iso_timestamp
from app.safety_plan.schemas import SafetyPlan, SimpleEntry

from conftest import FIXED_MOMENT


def test_file_name_uses_utc_calendar_date():
    assert export_file_name(FIXED_MOMENT) == "safety-plan-2024-05-01.pdf"
    late_evening_west = datetime(2024, 5, 1, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert export_file_name(late_evening_west) == "safety-plan-2024-05-02.pdf"


def test_iso_timestamp_format():
    assert iso_timestamp(FIXED_MOMENT) == "2024-05-01T09:30:15.123Z"


def test_export_saves_snapshot_and_renders(exporter, minimal_plan):
    result = exporter.export(minimal_plan)

    assert result.file_name == "safety-plan-2024-05-01.pdf"
    assert result.pdf_bytes.startswith(b"%PDF-")
    assert result.snapshot.timestamp == "2024-05-01T09:30:15.123Z"
    assert result.snapshot.data == minimal_plan

    stored = exporter.load_last()
    assert stored == result.snapshot
    assert json.loads(stored.to_json())["data"]["warningSteps"][0]["value"] == "Feeling hopeless"


def test_export_is_deterministic(exporter, minimal_plan):
    assert exporter.export(minimal_plan).pdf_bytes == exporter.export(minimal_plan).pdf_bytes


def test_export_overwrites_previous_snapshot(exporter, minimal_plan):
    exporter.export(minimal_plan)
    changed = minimal_plan.model_copy(deep=True)
    changed.safety_measures[0].update("Lock the cabinet")
    exporter.export(changed)

    assert exporter.load_last().data.safety_measures[0].text == "Lock the cabinet"


def test_exported_snapshot_is_detached_from_plan(exporter, minimal_plan):
    result = exporter.export(minimal_plan)
    minimal_plan.warning_steps[0].update("edited afterwards")
    assert result.snapshot.data.warning_steps[0].text == "Feeling hopeless"


def test_write_to_creates_directory(exporter, minimal_plan, tmp_path):
    result = exporter.export(minimal_plan)
    path = result.write_to(tmp_path / "nested" / "out")
    assert path.name == "safety-plan-2024-05-01.pdf"
    assert path.read_bytes() == result.pdf_bytes


def test_store_failure_is_reported_as_export_error(settings, minimal_plan):
    def broken_session():
        raise RuntimeError("disk unavailable")

    exporter = PlanExporter(settings, session_factory=broken_session, clock=lambda: FIXED_MOMENT)
    with pytest.raises(ExportError) as exc_info:
        exporter.export(minimal_plan)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_render_failure_is_reported_as_export_error(exporter, minimal_plan, monkeypatch):
    def broken_render(*args, **kwargs):
        raise ValueError("font missing")

    monkeypatch.setattr("app.safety_plan.export.render_pdf", broken_render)
    with pytest.raises(ExportError, match="font missing"):
        exporter.export(minimal_plan)


def test_malformed_plan_fails_loudly_and_is_not_saved(exporter):
    plan = SafetyPlan.seeded()
    # Bypass validation to simulate a programming error upstream.
    plan.support_contacts.append(SimpleEntry(id="3", text="wrong shape"))
    with pytest.raises(PlanShapeError):
        exporter.export(plan)
    assert exporter.load_last() is None


def test_uses_configured_document_text(settings, session_factory, minimal_plan, monkeypatch):
    captured = {}

    def capture_render(layout, title):
        captured["layout"] = layout
        captured["title"] = title
        return b"%PDF-stub"

    monkeypatch.setattr("app.safety_plan.export.render_pdf", capture_render)
    custom = settings.model_copy(update={"DOCUMENT_TITLE": "MY PLAN", "DOCUMENT_FOOTER": "Private copy"})
    exporter = PlanExporter(custom, session_factory=session_factory, clock=lambda: FIXED_MOMENT)

    assert exporter.export(minimal_plan).pdf_bytes == b"%PDF-stub"
    assert captured["title"] == "MY PLAN"
    assert captured["layout"].lines[0] == "MY PLAN"
    assert captured["layout"].lines[-1] == "Private copy"
