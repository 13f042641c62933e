"""
Analysis Extraction

Entry point of the extraction engine: raw analysis text in, typed result out.

    text → fields (summary, detail, type, date)
         → STRUCTURED_DATA block parsed by document type
         → post-processing

Every call is a pure function of its input and never raises.
"""

import logging

from clinical_extract.extraction.extraction_types import AnalysisResult
from clinical_extract.extraction.field_extractor import extract_fields
from clinical_extract.extraction.post_processor import post_process
from clinical_extract.extraction.structured_data import extract_structured_data

logger = logging.getLogger(__name__)


def extract_analysis(
    analysis: str | None,
    structured_data: bool = True,
    post_processing: bool = True,
    summary_lab_fallback: bool = True,
    detect_modality: bool = True,
) -> AnalysisResult:
    """Extract fields and structured records from analysis text."""
    text = analysis if isinstance(analysis, str) else ("" if analysis is None else str(analysis))

    fields = extract_fields(text)
    records = extract_structured_data(text, fields.document_type) if structured_data else None

    result = AnalysisResult(fields=fields, structured_data=records)
    logger.debug(
        "[Analyzer] %s, %s structured records",
        fields.document_type.value,
        "no" if records is None else len(records),
    )

    if post_processing:
        result = post_process(
            result,
            summary_lab_fallback=summary_lab_fallback,
            detect_modality=detect_modality,
        )

    return result
