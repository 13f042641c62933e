"""
Pipeline Module

End-to-end analysis text extraction orchestration.
"""

from clinical_extract.pipeline.pipeline import Pipeline
from clinical_extract.pipeline.config import PipelineConfig, configure_logging, load_config

__all__ = [
    "Pipeline",
    "PipelineConfig",
    "configure_logging",
    "load_config",
]
