"""
Extraction Data Types

Data models for fields and structured records recovered from analysis text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Union


class CanonicalDocumentType(str, Enum):
    """Clinical document categories used to route structured parsing."""

    LABORATORY_REPORT = "Laboratory Report"
    MEDICATION_LIST = "Medication List"
    IMMUNIZATION_RECORD = "Immunization Record"
    ALLERGY_LIST = "Allergy List"
    PROBLEM_LIST = "Problem List"
    RADIOLOGY_REPORT = "Radiology Report"
    DISCHARGE_SUMMARY = "Discharge Summary"
    PROGRESS_NOTE = "Progress Note"
    VITAL_SIGNS = "Vital Signs"
    MEDICAL_RECORD = "Medical Record"  # generic fallback


class NormalizedDocumentType(NamedTuple):
    """Result of normalizing a raw document type string.

    ``label`` carries the display string. For unrecognized input it is the
    title-cased raw text while ``canonical`` stays ``MEDICAL_RECORD``.
    """

    canonical: CanonicalDocumentType
    label: str
    recognized: bool = True


@dataclass(frozen=True)
class ExtractedFields:
    """Canonical fields recovered from one analysis text."""

    brief_summary: str
    detailed_analysis: str
    document_type: CanonicalDocumentType
    record_date: str = ""
    document_type_label: str = ""

    def __post_init__(self) -> None:
        if not self.document_type_label:
            object.__setattr__(self, "document_type_label", self.document_type.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "brief_summary": self.brief_summary,
            "detailed_analysis": self.detailed_analysis,
            "document_type": self.document_type.value,
            "document_type_label": self.document_type_label,
            "record_date": self.record_date,
        }


@dataclass
class ReferenceRange:
    """Numeric reference interval; either bound may be missing."""

    low: float | None = None
    high: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"low": self.low, "high": self.high}


@dataclass
class LabTest:
    """A single laboratory test result."""

    name: str
    value: float | int | str = ""
    unit: str = ""
    reference_range: ReferenceRange = field(default_factory=ReferenceRange)
    flag: str = "Normal"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
            "reference_range": self.reference_range.to_dict(),
            "flag": self.flag,
        }


@dataclass
class Medication:
    """A medication list entry."""

    name: str
    dosage: str = ""
    frequency: str = ""
    route: str = ""
    start_date: str = ""
    purpose: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "route": self.route,
            "start_date": self.start_date,
            "purpose": self.purpose,
        }


@dataclass
class Immunization:
    """An immunization record entry."""

    name: str
    date: str = ""
    manufacturer: str = ""
    lot_number: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "date": self.date,
            "manufacturer": self.manufacturer,
            "lot_number": self.lot_number,
        }


@dataclass
class Allergy:
    """An allergy list entry."""

    name: str
    reaction: str = ""
    severity: str = ""  # mild, moderate, severe
    onset: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reaction": self.reaction,
            "severity": self.severity,
            "onset": self.onset,
        }


@dataclass
class Condition:
    """A problem list entry."""

    name: str
    status: str = "Active"
    onset_date: str = ""
    provider: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "onset_date": self.onset_date,
            "provider": self.provider,
        }


@dataclass
class KeyValueItem:
    """A generic ``key: value`` line."""

    key: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value}


@dataclass
class TextItem:
    """A generic free-text line."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


StructuredRecord = Union[
    LabTest, Medication, Immunization, Allergy, Condition, KeyValueItem, TextItem
]


@dataclass
class AnalysisResult:
    """Everything recovered from one analysis text."""

    fields: ExtractedFields
    # None when the text carried no STRUCTURED_DATA block
    structured_data: list[StructuredRecord] | None = None

    # Post-processing outputs
    summary_lab_tests: list[LabTest] = field(default_factory=list)
    imaging_modality: str | None = None

    @property
    def document_type(self) -> CanonicalDocumentType:
        return self.fields.document_type

    @property
    def lab_tests(self) -> list[LabTest]:
        """Structured lab tests, or tests recovered from the summary."""
        structured = [r for r in self.structured_data or [] if isinstance(r, LabTest)]
        return structured or list(self.summary_lab_tests)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = self.fields.to_dict()
        data["structured_data"] = (
            [record.to_dict() for record in self.structured_data]
            if self.structured_data is not None
            else None
        )
        data["summary_lab_tests"] = [t.to_dict() for t in self.summary_lab_tests]
        data["imaging_modality"] = self.imaging_modality
        return data
