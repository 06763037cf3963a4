"""
Static section definitions, in the fixed order they appear in the wizard and the document.

Titles, descriptions and entry formats live together on one record so nothing downstream
has to re-derive them from the title string.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from app.safety_plan.schemas import EntryFormat, SectionKey

CRISIS_HOTLINE_LINE = "National Crisis Line: 1-800-273-8255 (TALK)"


class SectionTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: SectionKey
    title: str
    description: str
    entry_format: EntryFormat = EntryFormat.SIMPLE
    hotline_footer: bool = False

    # Wizard-facing wording
    step_title: str
    step_prompt: str


SECTION_TEMPLATES: Tuple[SectionTemplate, ...] = (
    SectionTemplate(
        key=SectionKey.WARNING_STEPS,
        title="WARNING SIGNS",
        description="What thoughts, mood, or behavior might indicate a crisis is developing?",
        step_title="Warning Signs",
        step_prompt="What thoughts, mood, or behavior might indicate a crisis is developing?",
    ),
    SectionTemplate(
        key=SectionKey.COPING_STRATEGIES,
        title="INTERNAL COPING STRATEGIES",
        description="Things I can do to take my mind off my problems without contacting another person:",
        step_title="Coping Strategies",
        step_prompt="What can you do by yourself to take your mind off your problems?",
    ),
    SectionTemplate(
        key=SectionKey.SOCIAL_SETTINGS,
        title="PEOPLE AND SOCIAL SETTINGS",
        description="People and places that provide distraction and support:",
        step_title="People & Places",
        step_prompt="List people and places that can provide distraction",
    ),
    SectionTemplate(
        key=SectionKey.SUPPORT_CONTACTS,
        title="PEOPLE I CAN ASK FOR HELP",
        description="People I can reach out to when in crisis:",
        entry_format=EntryFormat.CONTACT,
        step_title="Support Network",
        step_prompt="Who can you reach out to for help during a crisis?",
    ),
    SectionTemplate(
        key=SectionKey.PROFESSIONALS,
        title="PROFESSIONALS I CAN CONTACT",
        description="Professional resources and crisis hotlines:",
        entry_format=EntryFormat.PROFESSIONAL,
        hotline_footer=True,
        step_title="Professional Help",
        step_prompt="List medical professionals and crisis hotlines",
    ),
    SectionTemplate(
        key=SectionKey.SAFETY_MEASURES,
        title="MAKING THE ENVIRONMENT SAFER",
        description="Steps to make my environment safer:",
        step_title="Safety Measures",
        step_prompt="Steps to make your environment safer",
    ),
)


def template_for(key: SectionKey) -> SectionTemplate:
    for template in SECTION_TEMPLATES:
        if template.key == key:
            return template
    raise KeyError(key)
