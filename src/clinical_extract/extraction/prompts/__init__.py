"""
Analysis Prompts

Prompt templates describing the tagged text format the extraction engine
reads. The document analysis prompt asks for the four canonical sections;
the structured data prompt adds the per-type line formats.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent

AVAILABLE_PROMPTS = [
    "document_analysis",
    "structured_data",
    "multi_file",
]


def get_prompt_path(name: str) -> Path:
    """Get the path to a prompt file."""
    return PROMPTS_DIR / f"{name}.txt"


def load_prompt(name: str) -> str:
    """Load a prompt template."""
    path = get_prompt_path(name)
    if name not in AVAILABLE_PROMPTS or not path.exists():
        raise ValueError(f"Unknown prompt: {name}. Available: {AVAILABLE_PROMPTS}")
    return path.read_text()


def list_prompts() -> list[str]:
    """List available prompts."""
    return AVAILABLE_PROMPTS.copy()


def build_analysis_prompt(question: str | None = None, multi_file: bool = False) -> str:
    """
    Assemble the full analysis prompt.

    A user question, when given, is placed ahead of the section instructions.
    """
    parts = []
    if multi_file:
        parts.append(load_prompt("multi_file").strip())
    if question and question.strip():
        parts.append(f"User question: {question.strip()}")
    parts.append(load_prompt("document_analysis").strip())
    parts.append(load_prompt("structured_data").strip())
    return "\n\n".join(parts) + "\n"
