# app/safety_plan/schemas.py
# Full file content
from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.safety_plan.errors import PlanShapeError


class SectionKey(str, Enum):
    """The six plan sections, in document order."""

    WARNING_STEPS = "warning_steps"
    COPING_STRATEGIES = "coping_strategies"
    SOCIAL_SETTINGS = "social_settings"
    SUPPORT_CONTACTS = "support_contacts"
    PROFESSIONALS = "professionals"
    SAFETY_MEASURES = "safety_measures"


class EntryFormat(str, Enum):
    SIMPLE = "simple"
    CONTACT = "contact"
    PROFESSIONAL = "professional"


class EntryBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    # Display ordinal, also used as a stable widget key. Not a database key.
    id: str


class SimpleEntry(EntryBase):
    """A single free-text line."""

    entry_format: ClassVar[EntryFormat] = EntryFormat.SIMPLE

    text: str = Field(..., alias="value")

    @classmethod
    def blank(cls, id: str) -> "SimpleEntry":
        return cls(id=id, text="")

    def update(self, text: str) -> None:
        self.text = text


class PairedEntry(EntryBase, ABC):
    """Two related text fields that are rendered as one block."""

    @property
    @abstractmethod
    def primary(self) -> str: ...

    @property
    @abstractmethod
    def secondary(self) -> str: ...

    @abstractmethod
    def update_pair(self, primary: Optional[str] = None, secondary: Optional[str] = None) -> None: ...

    @classmethod
    @abstractmethod
    def blank(cls, id: str) -> "PairedEntry": ...


class ContactEntry(PairedEntry):
    entry_format: ClassVar[EntryFormat] = EntryFormat.CONTACT

    name: str
    contact: str

    @classmethod
    def blank(cls, id: str) -> "ContactEntry":
        return cls(id=id, name="", contact="")

    @property
    def primary(self) -> str:
        return self.name

    @property
    def secondary(self) -> str:
        return self.contact

    def update(self, name: Optional[str] = None, contact: Optional[str] = None) -> None:
        if name is not None:
            self.name = name
        if contact is not None:
            self.contact = contact

    def update_pair(self, primary: Optional[str] = None, secondary: Optional[str] = None) -> None:
        self.update(name=primary, contact=secondary)


class ProfessionalEntry(PairedEntry):
    entry_format: ClassVar[EntryFormat] = EntryFormat.PROFESSIONAL

    name: str
    phone: str

    @classmethod
    def blank(cls, id: str) -> "ProfessionalEntry":
        return cls(id=id, name="", phone="")

    @property
    def primary(self) -> str:
        return self.name

    @property
    def secondary(self) -> str:
        return self.phone

    def update(self, name: Optional[str] = None, phone: Optional[str] = None) -> None:
        if name is not None:
            self.name = name
        if phone is not None:
            self.phone = phone

    def update_pair(self, primary: Optional[str] = None, secondary: Optional[str] = None) -> None:
        self.update(name=primary, phone=secondary)


Entry = Union[SimpleEntry, ContactEntry, ProfessionalEntry]

ENTRY_TYPES: Dict[SectionKey, type] = {
    SectionKey.WARNING_STEPS: SimpleEntry,
    SectionKey.COPING_STRATEGIES: SimpleEntry,
    SectionKey.SOCIAL_SETTINGS: SimpleEntry,
    SectionKey.SUPPORT_CONTACTS: ContactEntry,
    SectionKey.PROFESSIONALS: ProfessionalEntry,
    SectionKey.SAFETY_MEASURES: SimpleEntry,
}

# Number of empty entries a fresh plan starts with.
DEFAULT_ENTRY_COUNTS: Dict[SectionKey, int] = {
    SectionKey.WARNING_STEPS: 3,
    SectionKey.COPING_STRATEGIES: 3,
    SectionKey.SOCIAL_SETTINGS: 2,
    SectionKey.SUPPORT_CONTACTS: 2,
    SectionKey.PROFESSIONALS: 1,
    SectionKey.SAFETY_MEASURES: 2,
}


class SafetyPlan(BaseModel):
    """All six sections of one user's plan. Serialized with the camelCase keys of the stored JSON."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    warning_steps: List[SimpleEntry] = Field(alias="warningSteps", min_length=1)
    coping_strategies: List[SimpleEntry] = Field(alias="copingStrategies", min_length=1)
    social_settings: List[SimpleEntry] = Field(alias="socialSettings", min_length=1)
    support_contacts: List[ContactEntry] = Field(alias="supportContacts", min_length=1)
    professionals: List[ProfessionalEntry] = Field(alias="professionals", min_length=1)
    safety_measures: List[SimpleEntry] = Field(alias="safetyMeasures", min_length=1)

    @classmethod
    def seeded(cls, counts: Optional[Mapping[SectionKey, int]] = None) -> "SafetyPlan":
        """Create a fresh plan with pre-seeded empty entries numbered from "1"."""
        final_counts = {**DEFAULT_ENTRY_COUNTS, **{SectionKey(k): v for k, v in (counts or {}).items()}}
        sections = {}
        for key in SectionKey:
            count = final_counts[key]
            if count < 1:
                raise PlanShapeError(f"Section '{key.value}' needs at least one entry, got {count}")
            entry_cls = ENTRY_TYPES[key]
            sections[key.value] = [entry_cls.blank(str(number)) for number in range(1, count + 1)]
        return cls(**sections)

    def section(self, key: SectionKey) -> List[Entry]:
        return getattr(self, SectionKey(key).value)

    def entry(self, key: SectionKey, index: int) -> Entry:
        entries = self.section(key)
        if not 0 <= index < len(entries):
            raise PlanShapeError(
                f"Section '{SectionKey(key).value}' has {len(entries)} entries, index {index} is out of range"
            )
        return entries[index]

    def entry_counts(self) -> Dict[SectionKey, int]:
        return {key: len(self.section(key)) for key in SectionKey}


class PlanSnapshot(BaseModel):
    """The JSON blob kept in the local store: {timestamp, data}."""

    timestamp: str = Field(..., description="ISO-8601 UTC time of the export")
    data: SafetyPlan

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "PlanSnapshot":
        return cls.model_validate_json(raw)
