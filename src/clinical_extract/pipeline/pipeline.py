"""
Clinical Extraction Pipeline

End-to-end orchestration of analysis text to JSON extraction results.
"""

from pathlib import Path
from typing import Any
import json
import logging

from clinical_extract.extraction.analyzer import extract_analysis
from clinical_extract.extraction.extraction_types import AnalysisResult
from clinical_extract.pipeline.config import PipelineConfig, load_config

logger = logging.getLogger(__name__)


class Pipeline:
    """End-to-end analysis text extraction pipeline."""

    def __init__(self, config: PipelineConfig | None = None):
        """Initialize pipeline with configuration."""
        self.config = config or PipelineConfig()

    @classmethod
    def from_config(cls, config_path: str | Path) -> "Pipeline":
        """Create pipeline from config file."""
        config = load_config(config_path)
        return cls(config)

    def process_text(self, text: str | None) -> AnalysisResult:
        """Extract an analysis result from analysis text."""
        ext = self.config.extraction
        return extract_analysis(
            text,
            structured_data=ext.structured_data,
            post_processing=ext.post_processing,
            summary_lab_fallback=ext.summary_lab_fallback,
            detect_modality=ext.detect_modality,
        )

    def process_file(self, filepath: str | Path) -> AnalysisResult:
        """Extract an analysis result from a UTF-8 text file."""
        path = Path(filepath)
        logger.debug("[Pipeline] Processing %s", path)
        return self.process_text(path.read_text(encoding="utf-8"))

    def result_to_dict(self, result: AnalysisResult, raw_text: str | None = None) -> dict[str, Any]:
        """
        Convert a result to its JSON-ready dictionary.

        ``raw_text`` is included only when the output config asks for it.
        """
        data = result.to_dict()
        if self.config.output.include_raw_text and raw_text is not None:
            data["raw_text"] = raw_text
        return data

    def to_json(
        self, result: AnalysisResult, indent: int | None = None, raw_text: str | None = None
    ) -> str:
        """Serialize result to JSON string."""
        if indent is None:
            indent = self.config.output.indent
        return json.dumps(self.result_to_dict(result, raw_text), indent=indent)

    def save(
        self,
        result: AnalysisResult,
        filepath: str | Path,
        indent: int | None = None,
        raw_text: str | None = None,
    ) -> None:
        """Save result to file."""
        path = Path(filepath)
        path.write_text(self.to_json(result, indent, raw_text), encoding="utf-8")
