"""
Shared fixtures for poeditor-mcp tests.
"""

import json
from typing import Any

import pytest

from poeditor_mcp.config import POEditorConfig
from poeditor_mcp.exceptions import POEditorError


class FakePOEditor:
    """In-memory stand-in for POEditorClient.

    Keeps terms keyed by (term, context) and per-language translations so that
    tests can observe remote side effects. Every call is recorded in `calls`.
    Endpoints listed in `failures` raise the given error instead.
    """

    def __init__(self, languages: list[str] | None = None):
        self.terms: dict[tuple[str, str], dict[str, Any]] = {}
        self.languages: list[str] = list(languages or ["en"])
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.failures: dict[str, POEditorError] = {}

    def seed(self, term: str, context: str = "", **translations: str) -> None:
        self.terms[(term, context)] = {
            "translations": {
                lang: {"content": text, "fuzzy": 0} for lang, text in translations.items()
            }
        }

    def endpoints(self) -> list[str]:
        return [endpoint for endpoint, _ in self.calls]

    def sent_records(self, endpoint: str) -> list[dict[str, Any]]:
        for name, form in self.calls:
            if name == endpoint:
                return json.loads(form["data"])
        raise AssertionError(f"{endpoint} was never called")

    async def call(self, endpoint: str, form: dict[str, str]) -> Any:
        self.calls.append((endpoint, dict(form)))
        if endpoint in self.failures:
            raise self.failures[endpoint]
        handler = getattr(self, "_" + endpoint.replace("/", "_"))
        return handler(form)

    def _terms_add(self, form):
        records = json.loads(form["data"])
        added = 0
        for record in records:
            key = (record["term"], record.get("context", ""))
            if key not in self.terms:
                self.terms[key] = {"translations": {}}
                added += 1
        return {"terms": {"parsed": len(records), "added": added}}

    def _translations_add(self, form):
        language = form["language"]
        records = json.loads(form["data"])
        added = 0
        for record in records:
            term = self.terms.get((record["term"], record["context"]))
            if term is not None and language not in term["translations"]:
                term["translations"][language] = record["translation"]
                added += 1
        return {"translations": {"parsed": len(records), "added": added}}

    def _translations_update(self, form):
        language = form["language"]
        records = json.loads(form["data"])
        updated = 0
        for record in records:
            term = self.terms.get((record["term"], record["context"]))
            if term is not None:
                term["translations"][language] = record["translation"]
                updated += 1
        return {"translations": {"parsed": len(records), "updated": updated}}

    def _terms_list(self, form):
        language = form.get("language")
        listed = []
        for (term, context), data in self.terms.items():
            entry: dict[str, Any] = {"term": term, "context": context, "reference": "", "tags": []}
            if language:
                entry["translation"] = data["translations"].get(language, {"content": "", "fuzzy": 0})
            listed.append(entry)
        return {"terms": listed}

    def _languages_list(self, form):
        return {"languages": [{"code": code, "translations": 0} for code in self.languages]}

    def _languages_available(self, form):
        return {"languages": [{"name": "English", "code": "en"}, {"name": "German", "code": "de"}]}

    def _languages_add(self, form):
        self.languages.append(form["language"])
        return None


@pytest.fixture
def fake_poeditor() -> FakePOEditor:
    return FakePOEditor()


@pytest.fixture
def config() -> POEditorConfig:
    """Configuration with a default project id."""
    return POEditorConfig(api_token="test-token", project_id=42, api_base="https://poeditor.test/v2")


@pytest.fixture
def config_without_project() -> POEditorConfig:
    return POEditorConfig(api_token="test-token", api_base="https://poeditor.test/v2")
