"""
Clinical Text Extraction

Deterministic extraction of summaries, document types, dates and structured
records from model-generated clinical document analyses.

Usage:
    from clinical_extract import Pipeline

    pipeline = Pipeline.from_config("configs/default.yaml")
    result = pipeline.process_file("analysis.txt")
    print(pipeline.to_json(result))

Author: Cleansheet LLC
License: CC BY 4.0
"""

from clinical_extract.extraction.analyzer import extract_analysis
from clinical_extract.pipeline.pipeline import Pipeline
from clinical_extract.pipeline.config import PipelineConfig

__version__ = "0.1.0"
__author__ = "Cleansheet LLC"
__license__ = "CC BY 4.0"

__all__ = [
    "Pipeline",
    "PipelineConfig",
    "extract_analysis",
    "__version__",
]
