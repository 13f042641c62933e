"""
Structured Data Parsing

Parses the STRUCTURED_DATA block of an analysis into typed records. The block
format depends on the document type:

    Laboratory Report    <LABORATORY_REPORT><Test>...</Test></LABORATORY_REPORT>
                         or "Glucose: 95 mg/dL, Reference Range: 70-100, Flag: Normal"
    Medication List      "Metformin, 500 mg, twice daily, oral, Started: Jan 2020, Purpose: Diabetes"
    Immunization Record  "Influenza, Date: Oct 2023, Manufacturer: Sanofi, Lot: AB123"
    Allergy List         "Penicillin, Reaction: Hives, Severity: Moderate, Onset: 2010"
    Problem List         "Hypertension, Status: Active, Onset: 2015, Provider: Dr. Lee"
    anything else        "key: value" or free text, one item per line

Parsers never raise. Lines that cannot be parsed are skipped.
"""

import logging
import re
from typing import Callable

from clinical_extract.extraction.extraction_types import (
    Allergy,
    CanonicalDocumentType,
    Condition,
    Immunization,
    KeyValueItem,
    LabTest,
    Medication,
    ReferenceRange,
    StructuredRecord,
    TextItem,
)
from clinical_extract.extraction.field_extractor import extract_document_type
from clinical_extract.extraction.tags import extract_tag

logger = logging.getLogger(__name__)

Parser = Callable[[str], list[StructuredRecord]]

STRUCTURED_DATA_TAG = "STRUCTURED_DATA"

_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")
_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)")
_LEADING_BULLET = re.compile(r"^(?:[-–—•*]+|\d+[.)])\s+")


# =============================================================================
# Helpers
# =============================================================================


def to_number(text: str) -> int | float | None:
    """Parse the leading number of ``text``; None when there is none."""
    match = _NUMBER.match(text or "")
    if not match:
        return None
    literal = match.group(1)
    try:
        if re.fullmatch(r"[-+]?\d+", literal):
            return int(literal)
        return float(literal)
    except ValueError:
        return None


def parse_reference_range(text: str | None) -> ReferenceRange:
    """Parse a "low - high" numeric range; bounds stay None if absent."""
    if not text:
        return ReferenceRange()
    match = _RANGE.search(text)
    if not match:
        return ReferenceRange()
    return ReferenceRange(low=float(match.group(1)), high=float(match.group(2)))


def labeled_field(line: str, *labels: str) -> str:
    """Value after the first of ``labels`` followed by a colon, up to the next comma."""
    for label in labels:
        match = re.search(rf"\b{re.escape(label)}\s*:\s*([^,]+)", line, re.IGNORECASE)
        if match:
            return match.group(1).strip()
    return ""


def _tag_value(block: str, *tag_names: str) -> str | None:
    for tag_name in tag_names:
        match = re.search(
            rf"<{re.escape(tag_name)}>(.*?)</{re.escape(tag_name)}>",
            block,
            re.IGNORECASE | re.DOTALL,
        )
        if match:
            return match.group(1).strip()
    return None


def _strip_bullet(text: str) -> str:
    return _LEADING_BULLET.sub("", text.strip(), count=1).strip()


def _content_lines(text: str, headers: tuple[str, ...] = ()) -> list[str]:
    """Non-empty lines, minus format hints and section headers."""
    lines = []
    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped or "Format:" in stripped:
            continue
        if any(header in stripped for header in headers):
            continue
        lines.append(stripped)
    return lines


# =============================================================================
# Laboratory reports
# =============================================================================


def _parse_lab_test_block(block: str) -> LabTest | None:
    name = _tag_value(block, "Name", "n")
    if not name:
        return None

    raw_value = _tag_value(block, "Value")
    if raw_value is None:
        value: int | float | str = ""
    else:
        number = to_number(raw_value)
        value = number if number is not None else raw_value

    flag = _tag_value(block, "Flag")
    return LabTest(
        name=name,
        value=value,
        unit=_tag_value(block, "Unit") or "",
        reference_range=parse_reference_range(
            _tag_value(block, "Reference-Range", "ReferenceRange", "Reference_Range")
        ),
        flag=flag or "Normal",
    )


def parse_lab_tests_xml(text: str) -> list[LabTest]:
    """Parse ``<LABORATORY_REPORT><Test>...</Test></LABORATORY_REPORT>`` blocks."""
    report = extract_tag(text, "LABORATORY_REPORT")
    if not report:
        return []

    lab_tests = []
    blocks = re.findall(r"<Test>(.*?)</Test>", report, re.IGNORECASE | re.DOTALL)
    for block in blocks:
        lab_test = _parse_lab_test_block(block)
        if lab_test is not None:
            lab_tests.append(lab_test)

    logger.debug("[Lab Parse] %d test blocks, %d parsed", len(blocks), len(lab_tests))
    return lab_tests


def parse_lab_test_line(line: str) -> LabTest | None:
    """Parse "name: value unit, Reference Range: low-high, Flag: flag"."""
    if line.startswith("<"):
        return None

    match = re.match(r"([^:]+):\s*([^,]+)", line)
    if not match:
        return None

    name = _strip_bullet(match.group(1))
    if not name:
        return None

    value_with_unit = match.group(2).strip()
    number_match = _NUMBER.match(value_with_unit)
    if number_match:
        value: int | float | str = to_number(number_match.group(1))
        unit = value_with_unit[number_match.end():].strip()
    else:
        value = value_with_unit
        unit = ""

    flag_match = re.search(r"Flag:\s*([^,\s]+)", line, re.IGNORECASE)
    return LabTest(
        name=name,
        value=value,
        unit=unit,
        reference_range=parse_reference_range(labeled_field(line, "Reference Range")),
        flag=flag_match.group(1).strip() if flag_match else "Normal",
    )


def parse_lab_tests(text: str) -> list[LabTest]:
    """
    Parse laboratory tests.

    The micro-XML convention is tried first. When it yields no tests the block
    is read line by line.
    """
    lab_tests = parse_lab_tests_xml(text)
    if lab_tests:
        return lab_tests

    logger.debug("[Lab Parse] Falling back to line-by-line parsing")
    for line in _content_lines(text, ("Laboratory Reports:",)):
        lab_test = parse_lab_test_line(line)
        if lab_test is not None:
            lab_tests.append(lab_test)
    return lab_tests


# =============================================================================
# Line-oriented lists
# =============================================================================


def _leading_token(line: str) -> str:
    return _strip_bullet(line.split(",", 1)[0])


def parse_medications(text: str) -> list[Medication]:
    """Parse "name, dosage, frequency, route, Started: date, Purpose: reason" lines."""
    medications = []
    for line in _content_lines(text, ("Medication Lists:",)):
        parts = [p.strip() for p in re.split(r",\s*", line)]
        if len(parts) < 2:
            continue

        name = _strip_bullet(parts[0])
        if not name:
            continue

        # Positional tokens stop at the first labeled field
        positional = []
        for part in parts[1:]:
            if re.match(r"(?:Started|Purpose)\s*:", part, re.IGNORECASE):
                break
            positional.append(part)
        positional += [""] * (3 - len(positional))

        medications.append(Medication(
            name=name,
            dosage=positional[0],
            frequency=positional[1],
            route=positional[2],
            start_date=labeled_field(line, "Started"),
            purpose=labeled_field(line, "Purpose"),
        ))
    return medications


def parse_immunizations(text: str) -> list[Immunization]:
    """Parse "vaccine, Date: date, Manufacturer: name, Lot: number" lines."""
    immunizations = []
    for line in _content_lines(text, ("Immunization Records:",)):
        name = _leading_token(line)
        if not name:
            continue
        immunizations.append(Immunization(
            name=name,
            date=labeled_field(line, "Date"),
            manufacturer=labeled_field(line, "Manufacturer"),
            lot_number=labeled_field(line, "Lot", "Lot Number"),
        ))
    return immunizations


def parse_allergies(text: str) -> list[Allergy]:
    """Parse "allergen, Reaction: symptoms, Severity: level, Onset: date" lines."""
    allergies = []
    for line in _content_lines(text, ("Allergy Lists:",)):
        name = _leading_token(line)
        if not name:
            continue
        allergies.append(Allergy(
            name=name,
            reaction=labeled_field(line, "Reaction"),
            severity=labeled_field(line, "Severity"),
            onset=labeled_field(line, "Onset"),
        ))
    return allergies


def parse_conditions(text: str) -> list[Condition]:
    """Parse "condition, Status: status, Onset: date, Provider: name" lines."""
    conditions = []
    for line in _content_lines(text, ("Problem Lists:",)):
        name = _leading_token(line)
        if not name:
            continue
        conditions.append(Condition(
            name=name,
            status=labeled_field(line, "Status") or "Active",
            onset_date=labeled_field(line, "Onset", "Onset Date"),
            provider=labeled_field(line, "Provider"),
        ))
    return conditions


def parse_generic_items(text: str) -> list[KeyValueItem | TextItem]:
    """One item per line: a key/value pair when the line has one, else its text."""
    items: list[KeyValueItem | TextItem] = []
    for line in _content_lines(text):
        match = re.match(r"([^:]+):\s*(.+)", line)
        if match:
            items.append(KeyValueItem(key=_strip_bullet(match.group(1)), value=match.group(2).strip()))
        else:
            items.append(TextItem(text=line))
    return items


# =============================================================================
# Dispatch
# =============================================================================

STRUCTURED_PARSERS: dict[CanonicalDocumentType, Parser] = {
    CanonicalDocumentType.LABORATORY_REPORT: parse_lab_tests,
    CanonicalDocumentType.MEDICATION_LIST: parse_medications,
    CanonicalDocumentType.IMMUNIZATION_RECORD: parse_immunizations,
    CanonicalDocumentType.ALLERGY_LIST: parse_allergies,
    CanonicalDocumentType.PROBLEM_LIST: parse_conditions,
    CanonicalDocumentType.RADIOLOGY_REPORT: parse_generic_items,
    CanonicalDocumentType.DISCHARGE_SUMMARY: parse_generic_items,
    CanonicalDocumentType.PROGRESS_NOTE: parse_generic_items,
    CanonicalDocumentType.VITAL_SIGNS: parse_generic_items,
    CanonicalDocumentType.MEDICAL_RECORD: parse_generic_items,
}


def parse_structured_block(
    block: str, document_type: CanonicalDocumentType
) -> list[StructuredRecord]:
    """Route a STRUCTURED_DATA block to the parser for ``document_type``."""
    parser = STRUCTURED_PARSERS.get(document_type, parse_generic_items)
    records = parser(block or "")
    logger.debug("[Structured] %s: %d records via %s", document_type.value, len(records), parser.__name__)
    return records


def extract_structured_data(
    analysis: str | None, document_type: CanonicalDocumentType | None = None
) -> list[StructuredRecord] | None:
    """
    Extract typed records from the STRUCTURED_DATA block of ``analysis``.

    Returns None when the block is absent. When ``document_type`` is not given
    it is determined from the analysis text itself.
    """
    if not analysis or not isinstance(analysis, str):
        return None

    block = extract_tag(analysis, STRUCTURED_DATA_TAG)
    if block is None:
        return None

    if document_type is None:
        document_type = extract_document_type(analysis).canonical

    return parse_structured_block(block, document_type)
