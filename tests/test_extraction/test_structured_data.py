"""
Tests for structured data parsing.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import pytest

from clinical_extract.extraction.extraction_types import (
    Allergy,
    CanonicalDocumentType,
    Condition,
    Immunization,
    KeyValueItem,
    LabTest,
    Medication,
    ReferenceRange,
    TextItem,
)
from clinical_extract.extraction.structured_data import (
    STRUCTURED_PARSERS,
    extract_structured_data,
    labeled_field,
    parse_allergies,
    parse_conditions,
    parse_generic_items,
    parse_immunizations,
    parse_lab_test_line,
    parse_lab_tests,
    parse_lab_tests_xml,
    parse_medications,
    parse_reference_range,
    parse_structured_block,
    to_number,
)


class TestHelpers:
    """Tests for parsing helpers."""

    def test_to_number(self):
        """Test leading number parsing."""
        assert to_number("95") == 95
        assert isinstance(to_number("95"), int)
        assert to_number("7.5 %") == 7.5
        assert to_number("-3") == -3
        assert to_number("high") is None
        assert to_number("") is None

    def test_parse_reference_range(self):
        """Test low-high ranges."""
        assert parse_reference_range("70-100") == ReferenceRange(low=70.0, high=100.0)
        assert parse_reference_range("3.5 - 5.1 mmol/L") == ReferenceRange(low=3.5, high=5.1)
        assert parse_reference_range("n/a") == ReferenceRange()
        assert parse_reference_range(None) == ReferenceRange()

    def test_labeled_field(self):
        """Test labeled value lookup."""
        line = "Influenza, Date: Oct 2023, Lot Number: X9"

        assert labeled_field(line, "Date") == "Oct 2023"
        assert labeled_field(line, "Lot", "Lot Number") == "X9"
        assert labeled_field(line, "Manufacturer") == ""


class TestLabTests:
    """Tests for laboratory report parsing."""

    def test_xml_blocks(self, tagged_lab_analysis: str):
        """Test micro-XML test blocks."""
        tests = parse_lab_tests_xml(tagged_lab_analysis)

        assert len(tests) == 2
        assert tests[0] == LabTest(
            name="Glucose",
            value=95,
            unit="mg/dL",
            reference_range=ReferenceRange(low=70, high=100),
            flag="Normal",
        )
        assert tests[1].name == "LDL"
        assert tests[1].flag == "High"

    def test_xml_block_without_name_is_skipped(self):
        """Test blocks missing a name are dropped."""
        text = (
            "<LABORATORY_REPORT>"
            "<Test><Value>5</Value></Test>"
            "<Test><n>Sodium</n><Value>140</Value></Test>"
            "</LABORATORY_REPORT>"
        )
        tests = parse_lab_tests_xml(text)

        assert [t.name for t in tests] == ["Sodium"]
        assert tests[0].flag == "Normal"
        assert tests[0].reference_range == ReferenceRange()

    def test_non_numeric_value_kept_as_text(self):
        """Test values that are not numbers stay strings."""
        text = "<LABORATORY_REPORT><Test><Name>Culture</Name><Value>Negative</Value></Test></LABORATORY_REPORT>"
        assert parse_lab_tests_xml(text)[0].value == "Negative"

    def test_line_fallback(self):
        """Test line parsing when no well-formed test block exists."""
        block = (
            "<LABORATORY_REPORT><Test><Value>1</Value></Test></LABORATORY_REPORT>\n"
            "Glucose: 95 mg/dL, Reference Range: 70-100, Flag: Normal"
        )
        tests = parse_lab_tests(block)

        assert tests == [LabTest(
            name="Glucose",
            value=95,
            unit="mg/dL",
            reference_range=ReferenceRange(low=70, high=100),
            flag="Normal",
        )]

    def test_line_parsing(self):
        """Test individual lab lines."""
        test = parse_lab_test_line("- Hemoglobin: 11.2 g/dL, Flag: Low")

        assert test.name == "Hemoglobin"
        assert test.value == 11.2
        assert test.unit == "g/dL"
        assert test.flag == "Low"

    def test_line_skips_headers_and_format_hints(self):
        """Test header and format lines are ignored."""
        block = (
            "Laboratory Reports:\n"
            "Format: [Test]: [Value] [Unit]\n"
            "Sodium: 140 mmol/L\n"
        )
        tests = parse_lab_tests(block)

        assert [t.name for t in tests] == ["Sodium"]

    def test_line_without_colon_is_skipped(self):
        """Test lines that are not "name: value" yield nothing."""
        assert parse_lab_test_line("just some words") is None
        assert parse_lab_test_line("<Test>broken") is None


class TestListParsers:
    """Tests for line-oriented list parsers."""

    def test_medications(self, medication_analysis: str):
        """Test medication lines."""
        medications = extract_structured_data(medication_analysis)

        assert medications == [
            Medication(
                name="Metformin",
                dosage="500 mg",
                frequency="twice daily",
                route="oral",
                start_date="Jan 2020",
                purpose="Diabetes",
            ),
            Medication(
                name="Lisinopril",
                dosage="10 mg",
                frequency="once daily",
                route="oral",
                start_date="Mar 2021",
                purpose="Blood pressure",
            ),
        ]

    def test_medication_partial_line(self):
        """Test missing positional fields stay empty."""
        medications = parse_medications("Aspirin, 81 mg, Purpose: Heart health")

        assert medications[0].dosage == "81 mg"
        assert medications[0].frequency == ""
        assert medications[0].route == ""
        assert medications[0].purpose == "Heart health"

    def test_medication_skips_malformed_line(self):
        """Test a garbage line is skipped without error."""
        block = "Metformin, 500 mg, twice daily, oral\nthis line is garbage"
        medications = parse_medications(block)

        assert len(medications) == 1
        assert medications[0].name == "Metformin"

    def test_immunizations(self):
        """Test immunization lines."""
        records = parse_immunizations(
            "Influenza, Date: Oct 2023, Manufacturer: Sanofi, Lot: AB123"
        )
        assert records == [Immunization(
            name="Influenza", date="Oct 2023", manufacturer="Sanofi", lot_number="AB123"
        )]

    def test_allergies(self):
        """Test allergy lines."""
        records = parse_allergies(
            "Allergy Lists:\nPenicillin, Reaction: Hives, Severity: Moderate, Onset: 2010"
        )
        assert records == [Allergy(
            name="Penicillin", reaction="Hives", severity="Moderate", onset="2010"
        )]

    def test_conditions(self):
        """Test condition lines and the default status."""
        records = parse_conditions(
            "Hypertension, Status: Resolved, Onset: 2015, Provider: Dr. Lee\n"
            "Asthma, Onset Date: 2001"
        )

        assert records[0] == Condition(
            name="Hypertension", status="Resolved", onset_date="2015", provider="Dr. Lee"
        )
        assert records[1].status == "Active"
        assert records[1].onset_date == "2001"

    def test_generic_items(self):
        """Test key/value and free-text lines."""
        items = parse_generic_items("Impression: Normal study\nNo acute findings\n\n")
        assert items == [
            KeyValueItem(key="Impression", value="Normal study"),
            TextItem(text="No acute findings"),
        ]


class TestDispatch:
    """Tests for document type dispatch."""

    def test_every_type_has_a_parser(self):
        """Test the dispatch table is total over the taxonomy."""
        assert set(STRUCTURED_PARSERS) == set(CanonicalDocumentType)

    @pytest.mark.parametrize("doc_type", [
        CanonicalDocumentType.RADIOLOGY_REPORT,
        CanonicalDocumentType.DISCHARGE_SUMMARY,
        CanonicalDocumentType.PROGRESS_NOTE,
        CanonicalDocumentType.VITAL_SIGNS,
        CanonicalDocumentType.MEDICAL_RECORD,
    ])
    def test_generic_types(self, doc_type):
        """Test types without a dedicated parser use the generic one."""
        records = parse_structured_block("Blood Pressure: 120/80", doc_type)
        assert records == [KeyValueItem(key="Blood Pressure", value="120/80")]

    def test_no_block_returns_none(self):
        """Test a text without a structured data block."""
        assert extract_structured_data("<BRIEF_SUMMARY>x</BRIEF_SUMMARY>") is None
        assert extract_structured_data("") is None
        assert extract_structured_data(None) is None

    def test_unrecognized_type_routes_to_generic(self):
        """Test unknown document types fall back to generic items."""
        text = (
            "<DOCUMENT_TYPE>Echocardiogram</DOCUMENT_TYPE>\n"
            "<STRUCTURED_DATA>\nEjection Fraction: 60%\n</STRUCTURED_DATA>"
        )
        assert extract_structured_data(text) == [KeyValueItem(key="Ejection Fraction", value="60%")]

    def test_explicit_type_overrides_detection(self):
        """Test a supplied document type is used as given."""
        text = "<STRUCTURED_DATA>Aspirin, 81 mg</STRUCTURED_DATA>"
        records = extract_structured_data(text, CanonicalDocumentType.MEDICATION_LIST)

        assert records == [Medication(name="Aspirin", dosage="81 mg")]
