"""
Field Extraction

Recovers the summary, detailed analysis, document type and date from analysis
text. The upstream text format has drifted over time, so each field is tried
against an ordered cascade of strategies:

    1. <TAG> ... </TAG>                 (current convention)
    2. "1. DETAILED ANALYSIS: ..."      (numbered headings)
    3. "DETAILED ANALYSIS: ..."         (plain headings)
    4. "**DETAILED_ANALYSIS:** ..."     (double-asterisk headings)

The first strategy yielding non-empty content wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Sequence

from clinical_extract.extraction.document_types import (
    classify_document_type,
    normalize_document_type,
)
from clinical_extract.extraction.extraction_types import (
    ExtractedFields,
    NormalizedDocumentType,
)
from clinical_extract.extraction.tags import extract_tag

logger = logging.getLogger(__name__)

Strategy = Callable[[str], "str | None"]

NO_DETAILED_ANALYSIS = "No detailed analysis available"
NO_BRIEF_SUMMARY = "No brief summary available"

# Headings that end a section in the numbered and plain conventions
KNOWN_HEADINGS = (
    "DETAILED ANALYSIS",
    "BRIEF SUMMARY",
    "DOCUMENT TYPE",
    "DATE",
    "STRUCTURED DATA",
)

_HEADING_ALTERNATION = "|".join(re.escape(h) for h in KNOWN_HEADINGS)

# A section ends at the next known heading wherever it appears, or at a tag.
# A numbered heading may omit its colon.
_NUMBERED_HEADING = rf"\b\d\.?[ \t]*(?:{_HEADING_ALTERNATION})\b:?"
_PLAIN_HEADING = rf"\b(?:{_HEADING_ALTERNATION})[ \t]*:"
_EMPHASIS_HEADING = r"\*\*[A-Z][A-Z_ ]*:\*\*"
_TAG_BOUNDARY = r"</?[A-Za-z_]+>"

_LEADING_MARKER = re.compile(r"^(?:[-–—•]+|\*(?!\*))\s*")
_FILE_SEPARATOR = re.compile(r"===\s*[^=]+?\s*===")
_STRUCTURED_BLOCK = re.compile(r"<STRUCTURED_DATA>.*?</STRUCTURED_DATA>", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class FieldSpec:
    """Where a field lives in each historical convention."""

    tag: str
    heading: str
    number: int
    emphasis_labels: tuple[str, ...]


DETAILED_ANALYSIS = FieldSpec("DETAILED_ANALYSIS", "DETAILED ANALYSIS", 1, ("DETAILED_ANALYSIS",))
BRIEF_SUMMARY = FieldSpec("BRIEF_SUMMARY", "BRIEF SUMMARY", 2, ("BRIEF_SUMMARY",))
DOCUMENT_TYPE = FieldSpec("DOCUMENT_TYPE", "DOCUMENT TYPE", 3, ("RECORD_TYPE", "DOCUMENT_TYPE"))
RECORD_DATE = FieldSpec("DATE", "DATE", 4, ("DATE",))


def first_non_empty(strategies: Sequence[Strategy], text: str) -> str | None:
    """Return the first non-empty result of ``strategies`` applied to ``text``."""
    for strategy in strategies:
        result = strategy(text)
        if result:
            return result
    return None


def clean_section(content: str | None) -> str:
    """
    Clean extracted section content.

    Removes "=== filename ===" separators left by multi-file analyses,
    literal ``**`` emphasis markers, and a single leading bullet or dash.
    """
    if not content:
        return ""
    cleaned = _FILE_SEPARATOR.sub("", content)
    cleaned = cleaned.replace("**", "").strip()
    cleaned = _LEADING_MARKER.sub("", cleaned, count=1)
    return cleaned.strip()


def _section(match: re.Match | None) -> str | None:
    if not match:
        return None
    return clean_section(match.group(1)) or None


def tag_strategy(section: FieldSpec) -> Strategy:
    """``<TAG> ... </TAG>``"""
    def strategy(text: str) -> str | None:
        return clean_section(extract_tag(text, section.tag)) or None
    return strategy


def numbered_heading_strategy(section: FieldSpec) -> Strategy:
    """``<n>. HEADING:`` through the next known heading."""
    pattern = re.compile(
        rf"\b{section.number}\.?[ \t]*{re.escape(section.heading)}\b:?(.*?)"
        rf"(?={_NUMBERED_HEADING}|{_PLAIN_HEADING}|{_TAG_BOUNDARY}|\Z)",
        re.IGNORECASE | re.DOTALL,
    )

    def strategy(text: str) -> str | None:
        return _section(pattern.search(text))
    return strategy


def plain_heading_strategy(section: FieldSpec) -> Strategy:
    """``HEADING:`` through the next known heading."""
    pattern = re.compile(
        rf"\b{re.escape(section.heading)}[ \t]*:(.*?)"
        rf"(?={_NUMBERED_HEADING}|{_PLAIN_HEADING}|{_TAG_BOUNDARY}|\Z)",
        re.IGNORECASE | re.DOTALL,
    )

    def strategy(text: str) -> str | None:
        return _section(pattern.search(text))
    return strategy


def emphasis_heading_strategy(section: FieldSpec) -> Strategy:
    """``**HEADING_NAME:**`` through the next emphasis heading."""
    labels = "|".join(re.escape(label) for label in section.emphasis_labels)
    pattern = re.compile(
        rf"\*\*(?:{labels}):\*\*(.*?)(?={_EMPHASIS_HEADING}|\Z)",
        re.DOTALL,
    )

    def strategy(text: str) -> str | None:
        return _section(pattern.search(text))
    return strategy


def field_strategies(section: FieldSpec) -> tuple[Strategy, ...]:
    """Strategy cascade for a field, in priority order."""
    return (
        tag_strategy(section),
        numbered_heading_strategy(section),
        plain_heading_strategy(section),
        emphasis_heading_strategy(section),
    )


DETAILED_ANALYSIS_STRATEGIES = field_strategies(DETAILED_ANALYSIS)
BRIEF_SUMMARY_STRATEGIES = field_strategies(BRIEF_SUMMARY)
DOCUMENT_TYPE_STRATEGIES = field_strategies(DOCUMENT_TYPE)
RECORD_DATE_STRATEGIES = field_strategies(RECORD_DATE)


def _as_text(analysis: str | None) -> str:
    if analysis is None:
        return ""
    return analysis if isinstance(analysis, str) else str(analysis)


def _field_text(analysis: str | None) -> str:
    """Analysis text minus its STRUCTURED_DATA block."""
    return _STRUCTURED_BLOCK.sub("", _as_text(analysis))


def extract_detailed_analysis(analysis: str | None) -> str:
    """Extract the detailed analysis section."""
    found = first_non_empty(DETAILED_ANALYSIS_STRATEGIES, _field_text(analysis))
    return found or NO_DETAILED_ANALYSIS


def extract_brief_summary(analysis: str | None) -> str:
    """Extract the brief summary section."""
    found = first_non_empty(BRIEF_SUMMARY_STRATEGIES, _field_text(analysis))
    return found or NO_BRIEF_SUMMARY


def extract_record_date(analysis: str | None) -> str:
    """Extract the record date, left unparsed (usually "mmm yyyy")."""
    return first_non_empty(RECORD_DATE_STRATEGIES, _field_text(analysis)) or ""


def extract_document_type(analysis: str | None) -> NormalizedDocumentType:
    """
    Determine the document type.

    A labeled type is normalized against the synonym table. With no labeled
    type, the whole text is classified by keyword heuristics.
    """
    text = _as_text(analysis)
    raw_type = first_non_empty(DOCUMENT_TYPE_STRATEGIES, _field_text(text))
    if raw_type:
        return normalize_document_type(raw_type)

    classified = classify_document_type(text)
    logger.debug("[Fields] No labeled document type, classified as %s", classified.value)
    return NormalizedDocumentType(classified, classified.value)


def extract_fields(analysis: str | None) -> ExtractedFields:
    """Extract all canonical fields from analysis text."""
    text = _as_text(analysis)
    document_type = extract_document_type(text)

    fields = ExtractedFields(
        brief_summary=extract_brief_summary(text),
        detailed_analysis=extract_detailed_analysis(text),
        document_type=document_type.canonical,
        record_date=extract_record_date(text),
        document_type_label=document_type.label,
    )
    logger.debug(
        "[Fields] type=%s label=%s date=%r",
        fields.document_type.value,
        fields.document_type_label,
        fields.record_date,
    )
    return fields
