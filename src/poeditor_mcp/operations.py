"""
Tool contracts for the POEditor MCP server.

Each contract takes a validated input record, builds the form fields for one
(or, for the compound operation, two) POEditor endpoints, and shapes the
result payload for the caller. Nothing here knows about MCP; the server
module only renders what these functions return.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol

from .config import PROJECT_ID_ENV, POEditorConfig
from .exceptions import MissingProjectIdError, POEditorError
from .models import (
    AddLanguageInput,
    AddTermsInput,
    AddTermsWithTranslationsInput,
    ListLanguagesInput,
    ListTermsInput,
    PluralForms,
    TermInput,
    TermWithTranslation,
    TranslationItem,
    TranslationsInput,
)

logger = logging.getLogger("poeditor-mcp")


class RemoteCaller(Protocol):
    """Anything that can perform a POEditor endpoint call."""

    async def call(self, endpoint: str, form: dict[str, str]) -> Any: ...


def resolve_project_id(explicit: int | None, config: POEditorConfig) -> int:
    """Return the project id to use: explicit value first, then the configured default.

    Raises:
        MissingProjectIdError: If neither is available
    """
    if explicit is not None:
        return explicit
    if config.project_id is not None:
        return config.project_id
    raise MissingProjectIdError(
        f"project_id is required (either pass it to the tool or set {PROJECT_ID_ENV})"
    )


# ----------------------------------------------------------------------
# Payload shaping
# ----------------------------------------------------------------------

def _encode(records: list[dict[str, Any]]) -> str:
    return json.dumps(records, ensure_ascii=False)


def translation_body(content: str, fuzzy: bool, plural: PluralForms | None) -> dict[str, Any]:
    """Build the "translation" object of a translation record.

    A plural map replaces content and fuzzy entirely.
    """
    if plural is not None:
        return {"plural": plural.as_payload()}
    return {"content": content, "fuzzy": 1 if fuzzy else 0}


def term_record(item: TermInput | TermWithTranslation) -> dict[str, Any]:
    """Build a terms/add record. Context is always sent, "" when absent."""
    record: dict[str, Any] = {"term": item.term, "context": item.context}
    if item.reference is not None:
        record["reference"] = item.reference
    if isinstance(item, TermInput):
        if item.comment is not None:
            record["comment"] = item.comment
        if item.plural is not None:
            record["plural"] = item.plural
    if item.tags is not None:
        record["tags"] = item.tags
    return record


def translation_record(item: TranslationItem | TermWithTranslation) -> dict[str, Any]:
    """Build a translations/add or translations/update record."""
    if isinstance(item, TermWithTranslation):
        source = item.translation
    else:
        source = item
    return {
        "term": item.term,
        "context": item.context,
        "translation": translation_body(source.content, source.fuzzy, source.plural),
    }


def build_term_records(items: Iterable[TermInput | TermWithTranslation]) -> list[dict[str, Any]]:
    return [term_record(item) for item in items]


def build_translation_records(
    items: Iterable[TranslationItem | TermWithTranslation],
) -> list[dict[str, Any]]:
    return [translation_record(item) for item in items]


# ----------------------------------------------------------------------
# Response shaping
# ----------------------------------------------------------------------

def _translation_text(translation: Any) -> Any:
    if not isinstance(translation, dict):
        return None
    return translation.get("content") or None


def reduce_term(raw: dict[str, Any]) -> dict[str, Any]:
    """Keep only term, context and translation content from a terms/list entry.

    Empty context and empty translation are omitted.
    """
    reduced: dict[str, Any] = {"term": raw.get("term")}
    if raw.get("context"):
        reduced["context"] = raw["context"]
    text = _translation_text(raw.get("translation"))
    if text:
        reduced["translation"] = text
    return reduced


def _searchable_values(term: dict[str, Any]) -> list[str]:
    values: list[str] = []
    for key in ("term", "context", "translation"):
        value = term.get(key)
        if isinstance(value, str):
            values.append(value)
        elif isinstance(value, dict):
            # plural translations
            values.extend(v for v in value.values() if isinstance(v, str))
    return values


def matches_search(term: dict[str, Any], search: str) -> bool:
    needle = search.lower()
    return any(needle in value.lower() for value in _searchable_values(term))


def project_fields(term: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    wanted = set(fields)
    return {key: value for key, value in term.items() if key in wanted}


def shape_term_listing(result: Any, params: ListTermsInput) -> dict[str, Any]:
    """
    Reduce a terms/list result into the compact listing returned to the caller.

    Order of operations: reduce, search, project fields, count, then
    offset/limit.

    Returns:
        {"total": n} when count_only is set, else {"terms": [...], "total": n}
        where total counts matches before offset/limit.
    """
    raw_terms = []
    if isinstance(result, dict):
        raw_terms = result.get("terms") or []

    terms = [reduce_term(t) for t in raw_terms if isinstance(t, dict)]

    if params.search:
        terms = [t for t in terms if matches_search(t, params.search)]

    if params.fields:
        terms = [project_fields(t, params.fields) for t in terms]

    total = len(terms)
    if params.count_only:
        return {"total": total}

    end = params.offset + params.limit if params.limit else None
    return {"terms": terms[params.offset:end], "total": total}


# ----------------------------------------------------------------------
# Contracts
# ----------------------------------------------------------------------

async def add_terms(client: RemoteCaller, config: POEditorConfig, params: AddTermsInput) -> Any:
    project_id = resolve_project_id(params.project_id, config)
    records = build_term_records(params.items)
    logger.debug(f"Adding {len(records)} term(s) to project {project_id}")

    result = await client.call("terms/add", {"id": str(project_id), "data": _encode(records)})
    if isinstance(result, dict) and result.get("terms") is not None:
        return result["terms"]
    return result


async def _send_translations(
    endpoint: str,
    client: RemoteCaller,
    config: POEditorConfig,
    params: TranslationsInput,
) -> Any:
    project_id = resolve_project_id(params.project_id, config)
    records = build_translation_records(params.items)
    logger.debug(f"{endpoint}: {len(records)} translation(s) in '{params.language}' for project {project_id}")

    result = await client.call(
        endpoint,
        {"id": str(project_id), "language": params.language, "data": _encode(records)},
    )
    return result if result is not None else {}


async def add_translations(client: RemoteCaller, config: POEditorConfig, params: TranslationsInput) -> Any:
    """Add translations for existing terms. Existing translations are kept."""
    return await _send_translations("translations/add", client, config, params)


async def update_translations(client: RemoteCaller, config: POEditorConfig, params: TranslationsInput) -> Any:
    """Add or overwrite translations for existing terms."""
    return await _send_translations("translations/update", client, config, params)


async def list_terms(client: RemoteCaller, config: POEditorConfig, params: ListTermsInput) -> dict[str, Any]:
    project_id = resolve_project_id(params.project_id, config)
    form = {"id": str(project_id)}
    if params.language:
        form["language"] = params.language

    result = await client.call("terms/list", form)
    return shape_term_listing(result, params)


async def list_languages(client: RemoteCaller, config: POEditorConfig, params: ListLanguagesInput) -> Any:
    project_id = resolve_project_id(params.project_id, config)
    result = await client.call("languages/list", {"id": str(project_id)})
    return result if result is not None else {}


async def list_available_languages(client: RemoteCaller) -> Any:
    result = await client.call("languages/available", {})
    return result if result is not None else {}


async def add_language(client: RemoteCaller, config: POEditorConfig, params: AddLanguageInput) -> Any:
    project_id = resolve_project_id(params.project_id, config)
    logger.debug(f"Adding language '{params.language}' to project {project_id}")
    result = await client.call("languages/add", {"id": str(project_id), "language": params.language})
    return result if result is not None else {}


async def add_terms_with_translations(
    client: RemoteCaller,
    config: POEditorConfig,
    params: AddTermsWithTranslationsInput,
) -> dict[str, Any]:
    """Create terms, then add their translations, in two sequential calls.

    Both calls derive (term, context) from the same items. If terms/add
    fails, translations/add is never attempted. If translations/add fails,
    the created terms are left in place and the error is re-raised with
    ``details["step"]`` and ``details["terms_added"]`` set.
    """
    project_id = resolve_project_id(params.project_id, config)
    term_records = build_term_records(params.items)
    translation_records = build_translation_records(params.items)
    logger.debug(
        f"Creating {len(term_records)} term(s) with '{params.language}' translations in project {project_id}"
    )

    terms_result = await client.call("terms/add", {"id": str(project_id), "data": _encode(term_records)})
    if isinstance(terms_result, dict) and terms_result.get("terms") is not None:
        terms_added = terms_result["terms"]
    else:
        terms_added = terms_result

    try:
        translations_result = await client.call(
            "translations/add",
            {"id": str(project_id), "language": params.language, "data": _encode(translation_records)},
        )
    except POEditorError as e:
        logger.error(f"Terms were created in project {project_id} but adding translations failed: {e}")
        e.details.update({"step": "translations/add", "terms_added": terms_added})
        raise

    return {
        "terms_added": terms_added,
        "translations_added": translations_result if translations_result is not None else {},
    }
