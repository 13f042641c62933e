#!/usr/bin/env python3
"""
Basic Usage Example

Demonstrates the simplest way to use the clinical extraction pipeline.

Usage:
    python examples/basic_usage.py

Requirements:
    - pip install clinical-text-extraction
"""

from clinical_extract import Pipeline, extract_analysis


def main():
    # Analysis text as returned by the upstream model
    analysis = """
    <DETAILED_ANALYSIS>
    Lipid panel drawn fasting. Total cholesterol 232 mg/dL, LDL 160 mg/dL,
    HDL 41 mg/dL. Glucose 102 mg/dL.
    </DETAILED_ANALYSIS>
    <BRIEF_SUMMARY>
    - Your cholesterol 232 and LDL 160 are above the healthy range.
    </BRIEF_SUMMARY>
    <DOCUMENT_TYPE>Blood Work</DOCUMENT_TYPE>
    <DATE>Mar 2024</DATE>
    """

    # One-off extraction
    result = extract_analysis(analysis)
    print(f"{result.fields.document_type_label} ({result.fields.record_date})")
    print(result.fields.brief_summary)

    # Lab values recovered from the summary, since there is no STRUCTURED_DATA block
    for lab_test in result.lab_tests:
        print(f"  {lab_test.name}: {lab_test.value} {lab_test.unit}")

    # Same thing through the pipeline, as JSON
    pipeline = Pipeline()
    print(pipeline.to_json(pipeline.process_text(analysis)))


if __name__ == "__main__":
    main()
