"""Tests for model JSON parsing and URL enrichment"""

import json
import logging

import pytest

from resume_ingest.exceptions import InvalidModelJson
from resume_ingest.services.prompts import RESUME_SCHEMA_SKELETON
from resume_ingest.services.reconciler import reconcile, strip_code_fence
from resume_ingest.services.url_harvester import HarvestedUrls, harvest_urls


def harvested_with(**categories) -> HarvestedUrls:
    harvested = HarvestedUrls()
    for category, urls in categories.items():
        harvested.by_category[category] = list(urls)
        harvested.all_urls.extend(urls)
    return harvested


def model_json(github="", linkedin="", portfolio="", **extra) -> str:
    body = {
        "personalInfo": {
            "name": "Alice Johnson",
            "contact": {"email": "a@b.com", "github": github, "linkedin": linkedin, "portfolio": portfolio},
        }
    }
    body.update(extra)
    return json.dumps(body)


class TestStripCodeFence:

    def test_json_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'

    def test_uppercase_json_tag(self):
        assert strip_code_fence('```JSON\n{"a": 1}\n```') == '{"a": 1}'


class TestParsing:

    def test_fenced_json_is_parsed(self):
        record = reconcile("```json\n" + model_json() + "\n```", harvested_with())
        assert record["personalInfo"]["name"] == "Alice Johnson"

    def test_invalid_json_raises(self):
        with pytest.raises(InvalidModelJson) as exc_info:
            reconcile("Sure! Here is the JSON: {name: Alice", harvested_with())
        assert exc_info.value.details

    def test_non_object_json_raises(self):
        with pytest.raises(InvalidModelJson):
            reconcile("[1, 2, 3]", harvested_with())

    def test_uppercase_fenced_json_is_parsed(self):
        record = reconcile("```JSON\n" + model_json() + "\n```", harvested_with())
        assert record["personalInfo"]["name"] == "Alice Johnson"

    def test_invalid_json_warning_omits_resume_content(self, caplog):
        with caplog.at_level(logging.WARNING, logger="resume_ingest.services.reconciler"):
            with pytest.raises(InvalidModelJson):
                reconcile('{"personalInfo": {"name": "Alice Johnson", "email": "a@b.com"', harvested_with())
        assert caplog.records
        assert "Alice Johnson" not in caplog.text
        assert "a@b.com" not in caplog.text
        assert "line 1" in caplog.text


class TestSchemaCoercion:

    def test_missing_top_level_keys_get_empty_defaults(self):
        record = reconcile(model_json(), harvested_with())
        for key in RESUME_SCHEMA_SKELETON:
            assert key in record
        assert record["education"] == []
        assert record["skills"]["soft"] == []
        assert record["onlinePresence"]["other"] == []
        assert record["additionalSections"] == {}

    def test_null_values_are_coerced(self):
        record = reconcile(json.dumps({"experience": None, "personalInfo": None}), harvested_with())
        assert record["experience"] == []
        assert record["personalInfo"]["contact"]["email"] == ""

    def test_missing_nested_keys_are_filled(self):
        record = reconcile(json.dumps({"personalInfo": {"name": "Alice"}}), harvested_with())
        assert record["personalInfo"]["name"] == "Alice"
        assert record["personalInfo"]["contact"]["linkedin"] == ""

    def test_extra_keys_and_list_items_pass_through(self):
        raw = json.dumps({
            "experience": [{"company": "Acme"}],
            "hobbyProjects": ["robots"],
        })
        record = reconcile(raw, harvested_with())
        assert record["experience"] == [{"company": "Acme"}]
        assert record["hobbyProjects"] == ["robots"]


class TestEnrichment:

    def test_existing_value_is_not_overwritten(self):
        record = reconcile(
            model_json(github="https://github.com/alice"),
            harvested_with(github=["https://github.com/bob"]),
        )
        assert record["personalInfo"]["contact"]["github"] == "https://github.com/alice"

    def test_empty_value_is_filled_with_first_harvested(self):
        record = reconcile(
            model_json(github=""),
            harvested_with(github=["https://github.com/bob", "https://github.com/carol"]),
        )
        assert record["personalInfo"]["contact"]["github"] == "https://github.com/bob"

    def test_linkedin_and_portfolio_filled(self):
        record = reconcile(
            model_json(),
            harvested_with(linkedin=["linkedin.com/in/alice"], portfolio=["https://alice.dev"]),
        )
        contact = record["personalInfo"]["contact"]
        assert contact["linkedin"] == "linkedin.com/in/alice"
        assert contact["portfolio"] == "https://alice.dev"

    def test_no_harvested_urls_leaves_field_empty(self):
        record = reconcile(model_json(), harvested_with())
        assert record["personalInfo"]["contact"]["github"] == ""

    def test_extracted_urls_always_attached(self, resume_text):
        harvested = harvest_urls(resume_text)
        record = reconcile(model_json(github="https://github.com/alice"), harvested)
        assert record["extractedUrls"] == harvested.by_category
        assert record["extractedUrls"]["github"] == ["github.com/alice"]

    def test_non_object_contact_is_left_alone(self):
        raw = json.dumps({"personalInfo": {"contact": "a@b.com"}})
        record = reconcile(raw, harvested_with(github=["github.com/alice"]))
        assert record["personalInfo"]["contact"] == "a@b.com"
