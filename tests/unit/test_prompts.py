"""Tests for prompt rendering"""

import json

from resume_ingest.services.prompts import (
    RESUME_SCHEMA_SKELETON,
    build_extraction_prompt,
    build_summary_prompt,
    empty_resume_record,
)


class TestSummaryPrompt:

    def test_interpolates_text(self, resume_text):
        prompt = build_summary_prompt(resume_text)
        assert resume_text in prompt
        assert "**Overall Assessment**" in prompt

    def test_braces_in_resume_are_kept_verbatim(self):
        prompt = build_summary_prompt("Built {templating} engine with {{jinja}}")
        assert "Built {templating} engine with {{jinja}}" in prompt


class TestExtractionPrompt:

    def test_embeds_full_schema_skeleton(self, resume_text):
        prompt = build_extraction_prompt(resume_text)
        assert json.dumps(RESUME_SCHEMA_SKELETON, indent=2) in prompt
        assert resume_text in prompt

    def test_empty_object_instruction_rendered(self):
        prompt = build_extraction_prompt("text")
        assert "{} for empty objects" in prompt

    def test_is_pure(self, resume_text):
        assert build_extraction_prompt(resume_text) == build_extraction_prompt(resume_text)


class TestEmptyResumeRecord:

    def test_every_top_level_key_present(self):
        record = empty_resume_record()
        assert list(record) == list(RESUME_SCHEMA_SKELETON)

    def test_lists_are_empty_and_objects_keep_keys(self):
        record = empty_resume_record()
        assert record["experience"] == []
        assert record["interests"] == []
        assert record["personalInfo"]["contact"]["github"] == ""
        assert record["skills"]["technical"] == []
        assert record["additionalSections"] == {}
