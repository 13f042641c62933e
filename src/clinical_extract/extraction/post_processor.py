"""
Post-processor for extracted analysis results.

This module provides:
1. Summary lab fallback - recovers common lab values from the brief summary
   when a lab report carries no structured tests
2. Imaging modality detection - tags radiology reports with a DICOM modality
"""

import logging
import re
from dataclasses import replace
from typing import NamedTuple

from clinical_extract.extraction.document_types import (
    OTHER_MODALITY,
    detect_imaging_modality,
)
from clinical_extract.extraction.extraction_types import (
    AnalysisResult,
    CanonicalDocumentType,
    LabTest,
)

logger = logging.getLogger(__name__)


class SummaryLabPattern(NamedTuple):
    """A lab value pattern searched for in free-text summaries."""
    pattern: str
    name: str
    unit: str


# Group 1 captures the value, group 2 an explicit unit when present
SUMMARY_LAB_PATTERNS: tuple[SummaryLabPattern, ...] = (
    SummaryLabPattern(r"hemoglobin:?\s*(\d+(?:\.\d+)?)\s*(g/dL)?", "Hemoglobin", "g/dL"),
    SummaryLabPattern(r"hematocrit:?\s*(\d+(?:\.\d+)?)\s*(%)?", "Hematocrit", "%"),
    SummaryLabPattern(r"\bwbc:?\s*(\d+(?:\.\d+)?)\s*(k/uL|10\^3/uL)?", "White Blood Cell Count", "10^3/uL"),
    SummaryLabPattern(r"platelets:?\s*(\d+(?:\.\d+)?)\s*(k/uL|10\^3/uL)?", "Platelet Count", "10^3/uL"),
    SummaryLabPattern(r"glucose:?\s*(\d+(?:\.\d+)?)\s*(mg/dL)?", "Glucose", "mg/dL"),
    SummaryLabPattern(r"cholesterol:?\s*(\d+(?:\.\d+)?)\s*(mg/dL)?", "Cholesterol", "mg/dL"),
    SummaryLabPattern(r"\bldl:?\s*(\d+(?:\.\d+)?)\s*(mg/dL)?", "LDL Cholesterol", "mg/dL"),
    SummaryLabPattern(r"\bhdl:?\s*(\d+(?:\.\d+)?)\s*(mg/dL)?", "HDL Cholesterol", "mg/dL"),
)


def extract_summary_lab_tests(summary: str | None) -> list[LabTest]:
    """
    Recover common lab values mentioned in a free-text summary.

    Example: "Glucose 102 mg/dL, hemoglobin 13.5" yields Glucose and
    Hemoglobin tests; the unit defaults per analyte when not written.
    """
    if not summary or not isinstance(summary, str):
        return []

    lab_tests = []
    for lab in SUMMARY_LAB_PATTERNS:
        match = re.search(lab.pattern, summary, re.IGNORECASE)
        if not match:
            continue
        literal = match.group(1)
        value = float(literal) if "." in literal else int(literal)
        lab_tests.append(LabTest(
            name=lab.name,
            value=value,
            unit=match.group(2) or lab.unit,
        ))
        logger.debug("[Summary Labs] Found %s = %s", lab.name, literal)

    return lab_tests


def post_process(
    result: AnalysisResult,
    summary_lab_fallback: bool = True,
    detect_modality: bool = True,
) -> AnalysisResult:
    """
    Apply deterministic enrichment to an analysis result.

    Returns a new result; the input is left untouched.

    Args:
        result: The extracted analysis result
        summary_lab_fallback: Recover lab values from the summary for lab
            reports without structured tests
        detect_modality: Tag radiology reports with an imaging modality
    """
    fields = result.fields
    summary_lab_tests = list(result.summary_lab_tests)
    imaging_modality = result.imaging_modality

    if summary_lab_fallback and fields.document_type == CanonicalDocumentType.LABORATORY_REPORT:
        has_structured_tests = any(isinstance(r, LabTest) for r in result.structured_data or [])
        if not has_structured_tests and not summary_lab_tests:
            summary_lab_tests = extract_summary_lab_tests(fields.brief_summary)
            logger.debug("[Post-process] Summary lab tests: %d", len(summary_lab_tests))

    if detect_modality and fields.document_type == CanonicalDocumentType.RADIOLOGY_REPORT:
        imaging_modality = detect_imaging_modality(fields.brief_summary)
        if imaging_modality == OTHER_MODALITY:
            imaging_modality = detect_imaging_modality(fields.detailed_analysis)
        logger.debug("[Post-process] Imaging modality: %s", imaging_modality)

    return replace(
        result,
        summary_lab_tests=summary_lab_tests,
        imaging_modality=imaging_modality,
    )
