"""
Pipeline Configuration

Configuration management for the clinical extraction pipeline.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class ExtractionConfig:
    """Extraction configuration."""

    structured_data: bool = True
    post_processing: bool = True
    summary_lab_fallback: bool = True
    detect_modality: bool = True


@dataclass
class OutputConfig:
    """JSON output configuration."""

    indent: int = 2
    include_raw_text: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""

    name: str = "clinical-extract"
    version: str = "0.1.0"
    log_level: str = "WARNING"

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PipelineConfig":
        """Create config from dictionary."""
        config = cls()
        if not data:
            return config

        if "name" in data:
            config.name = data["name"]
        if "version" in data:
            config.version = data["version"]
        if "log_level" in data:
            config.log_level = str(data["log_level"]).upper()

        # Extraction config
        if "extraction" in data:
            ext = data["extraction"] or {}
            config.extraction = ExtractionConfig(
                structured_data=ext.get("structured_data", True),
                post_processing=ext.get("post_processing", True),
                summary_lab_fallback=ext.get("summary_lab_fallback", True),
                detect_modality=ext.get("detect_modality", True),
            )

        # Output config
        if "output" in data:
            out = data["output"] or {}
            config.output = OutputConfig(
                indent=out.get("indent", 2),
                include_raw_text=out.get("include_raw_text", False),
            )

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "log_level": self.log_level,
            "extraction": {
                "structured_data": self.extraction.structured_data,
                "post_processing": self.extraction.post_processing,
                "summary_lab_fallback": self.extraction.summary_lab_fallback,
                "detect_modality": self.extraction.detect_modality,
            },
            "output": {
                "indent": self.output.indent,
                "include_raw_text": self.output.include_raw_text,
            },
        }


def load_config(config_path: str | Path) -> PipelineConfig:
    """Load configuration from YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return PipelineConfig.from_dict(data)


def configure_logging(level: str | int = "WARNING") -> None:
    """Set the log level for the ``clinical_extract`` package logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("clinical_extract")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
