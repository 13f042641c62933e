"""
Document Type Taxonomy

Canonical document categories, the synonym table used to normalize model
supplied type strings, and the keyword heuristics used when the analysis text
carries no type at all.

Flow:
    raw type string → synonym lookup → CanonicalDocumentType
    no type string  → keyword scan of the whole text → CanonicalDocumentType
"""

import logging
import re

from clinical_extract.extraction.extraction_types import (
    CanonicalDocumentType,
    NormalizedDocumentType,
)

logger = logging.getLogger(__name__)

DocType = CanonicalDocumentType


# =============================================================================
# Synonym table
# Lookup is substring containment in insertion order; first hit wins.
# =============================================================================

DOCUMENT_TYPE_SYNONYMS: dict[str, CanonicalDocumentType] = {
    # -------------------------------------------------------------------------
    # Lab reports
    # -------------------------------------------------------------------------
    "lab result": DocType.LABORATORY_REPORT,
    "lab results": DocType.LABORATORY_REPORT,
    "lab report": DocType.LABORATORY_REPORT,
    "laboratory result": DocType.LABORATORY_REPORT,
    "laboratory test": DocType.LABORATORY_REPORT,
    "blood test": DocType.LABORATORY_REPORT,
    "blood work": DocType.LABORATORY_REPORT,

    # -------------------------------------------------------------------------
    # Medications
    # -------------------------------------------------------------------------
    "medication": DocType.MEDICATION_LIST,
    "medications": DocType.MEDICATION_LIST,
    "medication record": DocType.MEDICATION_LIST,
    "prescription": DocType.MEDICATION_LIST,
    "prescriptions": DocType.MEDICATION_LIST,
    "drug list": DocType.MEDICATION_LIST,

    # -------------------------------------------------------------------------
    # Immunizations
    # -------------------------------------------------------------------------
    "immunization": DocType.IMMUNIZATION_RECORD,
    "immunizations": DocType.IMMUNIZATION_RECORD,
    "vaccination": DocType.IMMUNIZATION_RECORD,
    "vaccinations": DocType.IMMUNIZATION_RECORD,
    "vaccine record": DocType.IMMUNIZATION_RECORD,

    # -------------------------------------------------------------------------
    # Allergies
    # -------------------------------------------------------------------------
    "allergy": DocType.ALLERGY_LIST,
    "allergies": DocType.ALLERGY_LIST,
    "allergy record": DocType.ALLERGY_LIST,
    "drug allergies": DocType.ALLERGY_LIST,
    "food allergies": DocType.ALLERGY_LIST,

    # -------------------------------------------------------------------------
    # Conditions / problems
    # -------------------------------------------------------------------------
    "problem list": DocType.PROBLEM_LIST,
    "problems": DocType.PROBLEM_LIST,
    "diagnosis": DocType.PROBLEM_LIST,
    "diagnoses": DocType.PROBLEM_LIST,
    "condition": DocType.PROBLEM_LIST,
    "conditions": DocType.PROBLEM_LIST,
    "medical problems": DocType.PROBLEM_LIST,

    # -------------------------------------------------------------------------
    # Radiology
    # -------------------------------------------------------------------------
    "xray": DocType.RADIOLOGY_REPORT,
    "x-ray": DocType.RADIOLOGY_REPORT,
    "ct scan": DocType.RADIOLOGY_REPORT,
    "mri": DocType.RADIOLOGY_REPORT,
    "ultrasound": DocType.RADIOLOGY_REPORT,
    "imaging": DocType.RADIOLOGY_REPORT,

    # -------------------------------------------------------------------------
    # Progress notes
    # -------------------------------------------------------------------------
    "progress note": DocType.PROGRESS_NOTE,
    "soap note": DocType.PROGRESS_NOTE,
    "clinical note": DocType.PROGRESS_NOTE,
    "office visit": DocType.PROGRESS_NOTE,

    # -------------------------------------------------------------------------
    # Discharge summaries
    # -------------------------------------------------------------------------
    "discharge": DocType.DISCHARGE_SUMMARY,
    "hospital discharge": DocType.DISCHARGE_SUMMARY,

    # -------------------------------------------------------------------------
    # Vital signs
    # -------------------------------------------------------------------------
    "vitals": DocType.VITAL_SIGNS,
    "vital signs": DocType.VITAL_SIGNS,
}


# =============================================================================
# Keyword heuristics
# Tested in this order. Each category lists alternatives; an alternative
# matches when every phrase in it occurs in the lowercased text.
# =============================================================================

KEYWORD_RULES: tuple[tuple[CanonicalDocumentType, tuple[tuple[str, ...], ...]], ...] = (
    (DocType.MEDICATION_LIST, (
        ("medication list",),
        ("prescribed medication",),
        ("current medications",),
        ("drug name",),
        ("dosage", "frequency"),
    )),
    (DocType.IMMUNIZATION_RECORD, (
        ("immunization",),
        ("vaccination",),
        ("vaccine",),
        ("booster",),
        ("flu shot",),
    )),
    (DocType.ALLERGY_LIST, (
        ("allergy list",),
        ("known allergies",),
        ("drug allergies",),
        ("food allergies",),
        ("allergen", "reaction"),
    )),
    (DocType.PROBLEM_LIST, (
        ("problem list",),
        ("diagnosis list",),
        ("medical conditions",),
        ("chronic conditions",),
    )),
    (DocType.LABORATORY_REPORT, (
        ("lab report",),
        ("laboratory results",),
        ("test results",),
        ("reference range",),
    )),
    (DocType.RADIOLOGY_REPORT, (
        ("radiology",),
        ("x-ray",),
        ("mri",),
        ("ct scan",),
        ("ultrasound",),
    )),
    (DocType.DISCHARGE_SUMMARY, (
        ("discharge summary",),
        ("discharged from",),
        ("hospital course",),
    )),
    (DocType.PROGRESS_NOTE, (
        ("progress note",),
        ("soap note",),
        ("clinical note",),
    )),
    (DocType.VITAL_SIGNS, (
        ("vital signs",),
        ("blood pressure",),
        ("pulse", "temperature"),
    )),
)


# =============================================================================
# Imaging modality table (DICOM modality codes)
# =============================================================================

IMAGING_MODALITIES: dict[str, str] = {
    "mri": "MR",
    "magnetic resonance": "MR",
    "ct": "CT",
    "cat scan": "CT",
    "computed tomography": "CT",
    "ultrasound": "US",
    "sonogram": "US",
    "x-ray": "CR",
    "xray": "CR",
    "radiograph": "CR",
    "mammogram": "MG",
    "mammography": "MG",
    "nuclear medicine": "NM",
    "pet": "PT",
    "positron emission": "PT",
}

OTHER_MODALITY = "OT"

_CANONICAL_BY_LABEL = {t.value.lower(): t for t in CanonicalDocumentType}


def clean_type_string(raw: str) -> str:
    """Strip leading dashes, emphasis markers and surrounding whitespace."""
    cleaned = re.sub(r"^[-–—•]+\s*", "", raw.strip())
    cleaned = cleaned.replace("**", "")
    return cleaned.strip()


def title_case(text: str) -> str:
    """Upper-case the first character of each word, leaving the rest as-is."""
    return re.sub(r"\w\S*", lambda m: m.group(0)[0].upper() + m.group(0)[1:], text)


def normalize_document_type(raw: str | None) -> NormalizedDocumentType:
    """
    Normalize a raw document type string to the canonical taxonomy.

    Matching is case-insensitive. A string naming a canonical category is
    returned as that category; otherwise the synonym table is searched by
    substring containment. Unmatched input keeps its title-cased text as the
    label and falls back to ``MEDICAL_RECORD`` for routing.

    Example:
        normalize_document_type("Blood Test").canonical
        # CanonicalDocumentType.LABORATORY_REPORT
    """
    cleaned = clean_type_string(raw) if isinstance(raw, str) else ""
    if not cleaned:
        return NormalizedDocumentType(DocType.MEDICAL_RECORD, DocType.MEDICAL_RECORD.value)

    lower_type = cleaned.lower()

    canonical = _CANONICAL_BY_LABEL.get(lower_type)
    if canonical is not None:
        return NormalizedDocumentType(canonical, canonical.value)

    for synonym, canonical in DOCUMENT_TYPE_SYNONYMS.items():
        if synonym in lower_type:
            logger.debug("[DocType] '%s' matched synonym '%s' -> %s", cleaned, synonym, canonical.value)
            return NormalizedDocumentType(canonical, canonical.value)

    label = title_case(cleaned)
    logger.debug("[DocType] Unrecognized document type '%s', keeping label '%s'", cleaned, label)
    return NormalizedDocumentType(DocType.MEDICAL_RECORD, label, recognized=False)


def classify_document_type(text: str | None) -> CanonicalDocumentType:
    """
    Classify a whole analysis text by keyword heuristics.

    Categories are tested in the fixed order of ``KEYWORD_RULES``; the first
    category with a matching alternative wins. Returns ``MEDICAL_RECORD``
    when nothing matches.
    """
    if not text or not isinstance(text, str):
        return DocType.MEDICAL_RECORD

    lower_text = text.lower()

    for doc_type, alternatives in KEYWORD_RULES:
        for phrases in alternatives:
            if all(phrase in lower_text for phrase in phrases):
                logger.debug("[DocType] Classified as %s via %s", doc_type.value, phrases)
                return doc_type

    return DocType.MEDICAL_RECORD


def detect_imaging_modality(text: str | None) -> str:
    """Map a radiology description to a DICOM modality code (``OT`` if none)."""
    if not text or not isinstance(text, str):
        return OTHER_MODALITY

    lower_text = text.lower()
    for keyword, modality in IMAGING_MODALITIES.items():
        # Short codes like "ct" and "pet" only count as whole words
        if len(keyword) <= 3:
            if re.search(rf"\b{re.escape(keyword)}\b", lower_text):
                return modality
        elif keyword in lower_text:
            return modality

    return OTHER_MODALITY
