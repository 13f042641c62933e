"""
Tests for analysis prompts.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import pytest
from pathlib import Path

from clinical_extract.extraction.prompts import (
    AVAILABLE_PROMPTS,
    PROMPTS_DIR,
    build_analysis_prompt,
    get_prompt_path,
    list_prompts,
    load_prompt,
)


class TestPromptsModule:
    """Tests for prompts module."""

    def test_prompts_dir_exists(self):
        """Test that prompts directory exists."""
        assert PROMPTS_DIR.exists()
        assert PROMPTS_DIR.is_dir()

    def test_list_prompts(self):
        """Test list_prompts returns a copy."""
        prompts = list_prompts()

        assert prompts == AVAILABLE_PROMPTS
        prompts.append("extra")
        assert "extra" not in AVAILABLE_PROMPTS

    def test_get_prompt_path(self):
        """Test get_prompt_path function."""
        path = get_prompt_path("document_analysis")

        assert isinstance(path, Path)
        assert path.name == "document_analysis.txt"

    @pytest.mark.parametrize("name", AVAILABLE_PROMPTS)
    def test_all_prompts_load(self, name: str):
        """Test every listed prompt has a file."""
        assert len(load_prompt(name)) > 50

    def test_document_analysis_tags(self):
        """Test the analysis prompt asks for every tagged section."""
        prompt = load_prompt("document_analysis")

        for tag in ("DETAILED_ANALYSIS", "BRIEF_SUMMARY", "DOCUMENT_TYPE", "DATE"):
            assert f"<{tag}>" in prompt
            assert f"</{tag}>" in prompt
        assert "mmm yyyy" in prompt

    def test_unknown_prompt(self):
        """Test loading an unknown prompt."""
        with pytest.raises(ValueError, match="Unknown prompt"):
            load_prompt("nonexistent")


class TestBuildAnalysisPrompt:
    """Tests for build_analysis_prompt."""

    def test_default(self):
        """Test the single-file prompt."""
        prompt = build_analysis_prompt()

        assert prompt.startswith("Please review this document")
        assert "<STRUCTURED_DATA>" in prompt
        assert "multiple files" not in prompt
        assert "User question" not in prompt

    def test_multi_file_and_question(self):
        """Test the multi-file prefix and question placement."""
        prompt = build_analysis_prompt(question=" What is my glucose? ", multi_file=True)

        assert prompt.startswith("IMPORTANT")
        assert "User question: What is my glucose?" in prompt
        assert prompt.index("User question") < prompt.index("<DETAILED_ANALYSIS>")

