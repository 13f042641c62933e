"""
Extraction Module

Deterministic extraction of fields and structured records from clinical
analysis text.
"""

from clinical_extract.extraction.extraction_types import (
    AnalysisResult,
    CanonicalDocumentType,
    ExtractedFields,
    NormalizedDocumentType,
    LabTest,
    ReferenceRange,
    Medication,
    Immunization,
    Allergy,
    Condition,
    KeyValueItem,
    TextItem,
)
from clinical_extract.extraction.tags import extract_tag
from clinical_extract.extraction.field_extractor import (
    extract_brief_summary,
    extract_detailed_analysis,
    extract_document_type,
    extract_fields,
    extract_record_date,
)
from clinical_extract.extraction.document_types import (
    classify_document_type,
    detect_imaging_modality,
    normalize_document_type,
)
from clinical_extract.extraction.structured_data import (
    extract_structured_data,
    parse_structured_block,
)
from clinical_extract.extraction.post_processor import post_process
from clinical_extract.extraction.analyzer import extract_analysis

__all__ = [
    "AnalysisResult",
    "CanonicalDocumentType",
    "ExtractedFields",
    "NormalizedDocumentType",
    "LabTest",
    "ReferenceRange",
    "Medication",
    "Immunization",
    "Allergy",
    "Condition",
    "KeyValueItem",
    "TextItem",
    "extract_tag",
    "extract_brief_summary",
    "extract_detailed_analysis",
    "extract_document_type",
    "extract_fields",
    "extract_record_date",
    "classify_document_type",
    "detect_imaging_modality",
    "normalize_document_type",
    "extract_structured_data",
    "parse_structured_block",
    "post_process",
    "extract_analysis",
]
