"""
app/safety_plan/layout.py
~~~~~~~~~~~~~~~~~~~~~~~~~

Lays a SafetyPlan out on a single fixed-size page.

The result is a display list (`PageLayout`) of filled rectangles and text lines with
absolute positions in millimetres, measured from the top-left corner of the page.
Rendering it is someone else's job (see `app.safety_plan.pdf`).

Vertical positions come from per-format constants, never from measured text height,
so the layout height depends only on entry counts and formats. Content that runs past
the bottom of the page is not moved to a second page.
"""

from typing import List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict

from app.safety_plan.errors import PlanShapeError
from app.safety_plan.schemas import Entry, EntryFormat, PairedEntry, SafetyPlan, SectionKey, SimpleEntry
from app.safety_plan.templates import CRISIS_HOTLINE_LINE, SECTION_TEMPLATES, SectionTemplate

RGB = Tuple[int, int, int]

BRAND_BLUE: RGB = (23, 85, 166)
WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)
DESCRIPTION_GREY: RGB = (80, 80, 80)
FOOTER_GREY: RGB = (128, 128, 128)

SECONDARY_LABELS = {
    EntryFormat.CONTACT: "Contact",
    EntryFormat.PROFESSIONAL: "Phone",
}


class LayoutMetrics(BaseModel):
    """Page geometry and the fixed vertical increments, in millimetres (A4 by default)."""

    model_config = ConfigDict(frozen=True)

    page_width: float = 210
    page_height: float = 297

    title_y: float = 25
    title_font_size: float = 28

    top_margin: float = 35
    band_x: float = 14
    band_height: float = 8
    band_text_x: float = 16
    band_text_offset: float = 6
    band_font_size: float = 14

    text_x: float = 20
    description_offset: float = 16
    description_font_size: float = 11
    entry_block_offset: float = 24
    entry_font_size: float = 12

    simple_increment: float = 8
    paired_increment: float = 12
    paired_second_line_offset: float = 5
    hotline_offset: float = 5
    section_gap: float = 8

    footer_bottom_offset: float = 10
    footer_font_size: float = 10

    @property
    def band_width(self) -> float:
        return self.page_width - 2 * self.band_x

    def entry_increment(self, entry_format: EntryFormat) -> float:
        if entry_format == EntryFormat.SIMPLE:
            return self.simple_increment
        return self.paired_increment


DEFAULT_METRICS = LayoutMetrics()


class TextOp(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    x: float
    y: float  # baseline
    font_size: float
    color: RGB
    align: Literal["left", "center"] = "left"


class RectOp(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float  # top edge
    width: float
    height: float
    fill: RGB


DrawOp = Union[RectOp, TextOp]


class SectionLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: SectionKey
    start_y: float
    end_y: float
    ops: Tuple[DrawOp, ...]

    @property
    def lines(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, TextOp)]


class PageLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float
    height: float
    ops: Tuple[DrawOp, ...]
    sections: Tuple[SectionLayout, ...]
    final_y: float

    @property
    def lines(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, TextOp)]

    def section(self, key: SectionKey) -> SectionLayout:
        for section in self.sections:
            if section.key == key:
                return section
        raise KeyError(key)


def entry_lines(entry_format: EntryFormat, ordinal: int, entry: Entry) -> List[str]:
    """Text lines for one entry. Paired formats give two lines that move as one block."""
    if entry.entry_format != entry_format:
        raise PlanShapeError(
            f"Entry {entry.id!r} is a {entry.entry_format.value} entry, section expects {entry_format.value}"
        )
    if isinstance(entry, SimpleEntry):
        return [f"{ordinal}. {entry.text}"]
    if isinstance(entry, PairedEntry):
        label = SECONDARY_LABELS[entry_format]
        return [f"{ordinal}. Name: {entry.primary}", f"   {label}: {entry.secondary}"]
    raise PlanShapeError(f"Unsupported entry type: {type(entry).__name__}")


def section_height(template: SectionTemplate, entry_count: int, metrics: LayoutMetrics = DEFAULT_METRICS) -> float:
    """Vertical space a section takes, including the gap before the next one."""
    height = metrics.entry_block_offset + entry_count * metrics.entry_increment(template.entry_format)
    if template.hotline_footer:
        height += metrics.paired_increment
    return height + metrics.section_gap


def layout_section(
    step: int,
    template: SectionTemplate,
    entries: Sequence[Entry],
    y: float,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> SectionLayout:
    """Lay out one section starting at `y`. The returned `end_y` is where the next section starts."""
    if not entries:
        raise PlanShapeError(f"Section '{template.key.value}' has no entries")

    ops: List[DrawOp] = [
        RectOp(x=metrics.band_x, y=y, width=metrics.band_width, height=metrics.band_height, fill=BRAND_BLUE),
        TextOp(
            text=f"STEP {step}: {template.title}",
            x=metrics.band_text_x,
            y=y + metrics.band_text_offset,
            font_size=metrics.band_font_size,
            color=WHITE,
        ),
        TextOp(
            text=template.description,
            x=metrics.text_x,
            y=y + metrics.description_offset,
            font_size=metrics.description_font_size,
            color=DESCRIPTION_GREY,
        ),
    ]

    cursor = y + metrics.entry_block_offset
    increment = metrics.entry_increment(template.entry_format)
    for ordinal, entry in enumerate(entries, start=1):
        for line_no, line in enumerate(entry_lines(template.entry_format, ordinal, entry)):
            ops.append(
                TextOp(
                    text=line,
                    x=metrics.text_x,
                    y=cursor + line_no * metrics.paired_second_line_offset,
                    font_size=metrics.entry_font_size,
                    color=BLACK,
                )
            )
        cursor += increment

    if template.hotline_footer:
        ops.append(
            TextOp(
                text=CRISIS_HOTLINE_LINE,
                x=metrics.text_x,
                y=cursor + metrics.hotline_offset,
                font_size=metrics.entry_font_size,
                color=BLACK,
            )
        )
        cursor += metrics.paired_increment

    return SectionLayout(key=template.key, start_y=y, end_y=cursor + metrics.section_gap, ops=tuple(ops))


def layout_plan(
    plan: SafetyPlan,
    *,
    title: Optional[str] = None,
    footer: Optional[str] = None,
    templates: Sequence[SectionTemplate] = SECTION_TEMPLATES,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> PageLayout:
    """Fold the templates over the plan, threading the vertical cursor from section to section."""
    ops: List[DrawOp] = []
    if title:
        ops.append(
            TextOp(
                text=title,
                x=metrics.page_width / 2,
                y=metrics.title_y,
                font_size=metrics.title_font_size,
                color=BRAND_BLUE,
                align="center",
            )
        )

    sections: List[SectionLayout] = []
    y = metrics.top_margin
    for step, template in enumerate(templates, start=1):
        section = layout_section(step, template, plan.section(template.key), y, metrics)
        sections.append(section)
        ops.extend(section.ops)
        y = section.end_y

    # Fixed position, independent of the cursor.
    if footer:
        ops.append(
            TextOp(
                text=footer,
                x=metrics.page_width / 2,
                y=metrics.page_height - metrics.footer_bottom_offset,
                font_size=metrics.footer_font_size,
                color=FOOTER_GREY,
                align="center",
            )
        )

    return PageLayout(
        width=metrics.page_width,
        height=metrics.page_height,
        ops=tuple(ops),
        sections=tuple(sections),
        final_y=y,
    )
