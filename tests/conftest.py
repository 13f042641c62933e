"""
Pytest Configuration and Shared Fixtures

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import logging
from pathlib import Path

import pytest


# =============================================================================
# ANALYSIS TEXT FIXTURES
# =============================================================================


@pytest.fixture
def tagged_lab_analysis() -> str:
    """Lab report analysis in the tagged convention with micro-XML tests."""
    return (
        "<DETAILED_ANALYSIS>\n"
        "Complete blood count and metabolic panel.\n"
        "</DETAILED_ANALYSIS>\n"
        "<BRIEF_SUMMARY>Your blood sugar is slightly high.</BRIEF_SUMMARY>\n"
        "<DOCUMENT_TYPE>Blood Test</DOCUMENT_TYPE>\n"
        "<DATE>Mar 2024</DATE>\n"
        "<STRUCTURED_DATA>\n"
        "<LABORATORY_REPORT>"
        "<Test><Name>Glucose</Name><Value>95</Value><Unit>mg/dL</Unit>"
        "<Reference-Range>70-100</Reference-Range><Flag>Normal</Flag></Test>"
        "<Test><Name>LDL</Name><Value>160</Value><Unit>mg/dL</Unit>"
        "<Reference-Range>0-130</Reference-Range><Flag>High</Flag></Test>"
        "</LABORATORY_REPORT>\n"
        "</STRUCTURED_DATA>"
    )


@pytest.fixture
def numbered_analysis() -> str:
    """Analysis in the numbered heading convention."""
    return (
        "1. DETAILED ANALYSIS: The patient takes two medications daily.\n"
        "2. BRIEF SUMMARY: Two daily medications.\n"
        "3. DOCUMENT TYPE: Prescription\n"
        "4. DATE: Jan 2023\n"
    )


@pytest.fixture
def emphasis_analysis() -> str:
    """Analysis in the double-asterisk heading convention."""
    return (
        "**DETAILED_ANALYSIS:** Chest x-ray shows clear lungs.\n"
        "**BRIEF_SUMMARY:** Normal chest x-ray.\n"
        "**RECORD_TYPE:** X-Ray\n"
        "**DATE:** Feb 2022\n"
    )


@pytest.fixture
def medication_analysis() -> str:
    """Medication list analysis with a structured data block."""
    return (
        "<DETAILED_ANALYSIS>Current medications.</DETAILED_ANALYSIS>\n"
        "<BRIEF_SUMMARY>You take two medications.</BRIEF_SUMMARY>\n"
        "<DOCUMENT_TYPE>Medication List</DOCUMENT_TYPE>\n"
        "<DATE>Jun 2023</DATE>\n"
        "<STRUCTURED_DATA>\n"
        "Medication Lists:\n"
        "Metformin, 500 mg, twice daily, oral, Started: Jan 2020, Purpose: Diabetes\n"
        "Lisinopril, 10 mg, once daily, oral, Started: Mar 2021, Purpose: Blood pressure\n"
        "</STRUCTURED_DATA>"
    )


@pytest.fixture
def analysis_file(tmp_path: Path, tagged_lab_analysis: str) -> Path:
    """Lab analysis written to a text file."""
    path = tmp_path / "lab_analysis.txt"
    path.write_text(tagged_lab_analysis, encoding="utf-8")
    return path


# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """YAML pipeline config file."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "name: test-pipeline\n"
        "log_level: debug\n"
        "extraction:\n"
        "  structured_data: true\n"
        "  post_processing: false\n"
        "output:\n"
        "  indent: 4\n"
        "  include_raw_text: true\n"
    )
    return path


# =============================================================================
# LOGGING FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging between tests."""
    logger = logging.getLogger("clinical_extract")
    level = logger.level
    yield
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
