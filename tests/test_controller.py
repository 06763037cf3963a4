import pytest

from app.safety_plan.controller import SafetyPlanWizard
from app.safety_plan.errors import ExportError, PlanLockedError, PlanShapeError
from app.safety_plan.export import PlanExporter
from app.safety_plan.schemas import SectionKey
from app.safety_plan.templates import SECTION_TEMPLATES


def test_wizard_starts_on_first_step_with_seeded_plan():
    wizard = SafetyPlanWizard()
    assert wizard.current_step == 1
    assert wizard.step_count == len(SECTION_TEMPLATES) == 6
    assert wizard.is_first_step and not wizard.is_last_step
    assert wizard.current_template.key == SectionKey.WARNING_STEPS
    assert len(wizard.plan.warning_steps) == 3


def test_step_cursor_is_clamped():
    wizard = SafetyPlanWizard()
    assert wizard.retreat() == 1

    for expected in range(2, 7):
        assert wizard.advance() == expected
    assert wizard.advance() == 6
    assert wizard.is_last_step
    assert wizard.progress == 1
    assert wizard.current_template.key == SectionKey.SAFETY_MEASURES

    assert wizard.retreat() == 5


def test_set_text_and_set_pair_edit_in_place():
    wizard = SafetyPlanWizard()
    wizard.set_text(SectionKey.COPING_STRATEGIES, 1, "Listen to music")
    wizard.set_pair(SectionKey.SUPPORT_CONTACTS, 0, primary="Jane")
    wizard.set_pair(SectionKey.SUPPORT_CONTACTS, 0, secondary="555-1234")
    wizard.set_pair(SectionKey.PROFESSIONALS, 0, primary="Dr. Lee", secondary="555-5678")

    plan = wizard.plan
    assert plan.coping_strategies[1].text == "Listen to music"
    assert (plan.support_contacts[0].name, plan.support_contacts[0].contact) == ("Jane", "555-1234")
    assert (plan.professionals[0].name, plan.professionals[0].phone) == ("Dr. Lee", "555-5678")
    assert plan.entry_counts()[SectionKey.COPING_STRATEGIES] == 3


def test_empty_strings_are_accepted():
    wizard = SafetyPlanWizard()
    wizard.set_text(SectionKey.WARNING_STEPS, 0, "something")
    wizard.set_text(SectionKey.WARNING_STEPS, 0, "")
    assert wizard.plan.warning_steps[0].text == ""


def test_wrong_operation_for_section_format():
    wizard = SafetyPlanWizard()
    with pytest.raises(PlanShapeError):
        wizard.set_text(SectionKey.SUPPORT_CONTACTS, 0, "Jane")
    with pytest.raises(PlanShapeError):
        wizard.set_pair(SectionKey.WARNING_STEPS, 0, primary="Jane")
    with pytest.raises(PlanShapeError):
        wizard.set_text(SectionKey.WARNING_STEPS, 3, "out of range")


def test_finish_exports_and_locks(exporter):
    wizard = SafetyPlanWizard()
    wizard.set_text(SectionKey.WARNING_STEPS, 0, "Feeling hopeless")

    result = wizard.finish(exporter)

    assert wizard.locked
    assert result.snapshot.data.warning_steps[0].text == "Feeling hopeless"
    assert exporter.load_last() == result.snapshot
    with pytest.raises(PlanLockedError):
        wizard.set_text(SectionKey.WARNING_STEPS, 0, "changed")
    with pytest.raises(PlanLockedError):
        wizard.set_pair(SectionKey.PROFESSIONALS, 0, primary="changed")


def test_finish_failure_surfaces_and_can_be_retried(settings, exporter):
    def broken_session():
        raise OSError("read-only file system")

    wizard = SafetyPlanWizard()
    with pytest.raises(ExportError):
        wizard.finish(PlanExporter(settings, session_factory=broken_session))
    assert wizard.locked

    result = wizard.finish(exporter)
    assert result.pdf_bytes.startswith(b"%PDF-")
