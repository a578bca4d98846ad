"""
POEditor MCP Server
Exposes the POEditor translation-management API as MCP tools, built with FastMCP.
"""

import json
import logging
import os
import sys
from typing import Annotated, Any

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from pydantic import Field, ValidationError

from . import operations
from .client import POEditorClient
from .config import POEditorConfig
from .exceptions import ConfigurationError
from .models import (
    AddLanguageInput,
    AddTermsInput,
    AddTermsWithTranslationsInput,
    ListField,
    ListLanguagesInput,
    ListTermsInput,
    TermInput,
    TermWithTranslation,
    TranslationItem,
    TranslationsInput,
    input_error,
    parse_input,
)

logger = logging.getLogger("poeditor-mcp")

SERVER_NAME = "poeditor-mcp"

ProjectIdArg = Annotated[
    int | None,
    Field(description="POEditor project id. Defaults to POEDITOR_PROJECT_ID when omitted."),
]
CONTEXT_HINT = (
    "Important: if a term was created with a context, you must provide the same "
    "context value to match that term."
)


def render(result: Any) -> str:
    """Pretty JSON for mutating and administrative tools."""
    return json.dumps(result, indent=2, ensure_ascii=False)


def render_compact(result: Any) -> str:
    """Compact JSON for the high-volume listing tool."""
    return json.dumps(result, separators=(",", ":"), ensure_ascii=False)


def _validation_cause(error: BaseException | None) -> ValidationError | None:
    while error is not None:
        if isinstance(error, ValidationError):
            return error
        error = error.__cause__
    return None


class ArgumentValidationMiddleware(Middleware):
    """Report FastMCP's own argument validation failures as InputValidationError.

    Tool signatures are validated by FastMCP before the handler runs, so a
    malformed item never reaches parse_input.
    """

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        try:
            return await call_next(context)
        except Exception as e:
            cause = _validation_cause(e)
            if cause is None:
                raise
            raise input_error(context.message.name, cause) from None


def create_server(config: POEditorConfig, client: operations.RemoteCaller | None = None) -> FastMCP:
    """Build the FastMCP server with every POEditor tool registered.

    Args:
        config: Startup configuration
        client: Remote caller to use. Defaults to a POEditorClient for config.
    """
    remote = client or POEditorClient(config)
    mcp = FastMCP(name=SERVER_NAME)
    mcp.add_middleware(ArgumentValidationMiddleware())

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    @mcp.tool(
        description=(
            "Add new terms to the project (terms only, no translations). If you also have "
            "translations for the new terms, prefer add_terms_with_translations. "
            "A term is identified by its text together with its context."
        )
    )
    async def add_terms(
        items: Annotated[list[TermInput], Field(description="Terms to create (at least one)")],
        project_id: ProjectIdArg = None,
    ) -> str:
        logger.debug(f"add_terms called with {len(items)} item(s)")
        params = parse_input(AddTermsInput, project_id=project_id, items=items)
        return render(await operations.add_terms(remote, config, params))

    @mcp.tool(
        description=(
            "List all project terms (optionally include translations for a specific language). "
            "Returns only term names, contexts, and translation content to minimize response size. "
            "Use limit, offset, search, count_only, and fields parameters to reduce token usage."
        )
    )
    async def list_terms(
        project_id: ProjectIdArg = None,
        language: Annotated[str | None, Field(description="Language code whose translations to include")] = None,
        limit: Annotated[int | None, Field(description="Maximum number of terms to return")] = None,
        offset: Annotated[int | None, Field(description="Number of matching terms to skip")] = None,
        search: Annotated[
            str | None,
            Field(description="Case-insensitive substring filter over term, context and translation"),
        ] = None,
        count_only: Annotated[bool | None, Field(description="Return only the number of matching terms")] = None,
        fields: Annotated[
            list[ListField] | None,
            Field(description="Subset of 'term', 'context', 'translation' to keep on each term"),
        ] = None,
    ) -> str:
        logger.debug(f"list_terms called (language={language}, search={search!r}, count_only={count_only})")
        params = parse_input(
            ListTermsInput,
            project_id=project_id,
            language=language,
            limit=limit,
            offset=offset,
            search=search,
            count_only=count_only,
            fields=fields,
        )
        return render_compact(await operations.list_terms(remote, config, params))

    @mcp.tool(
        description=(
            "PREFERRED METHOD: Create multiple new terms and add their translations in one operation. "
            "Use this instead of calling add_terms followed by add_translations separately. This ensures "
            "terms and translations are properly linked (especially important when using context)."
        )
    )
    async def add_terms_with_translations(
        language: Annotated[str, Field(description="Language code for the translations, e.g. 'en'")],
        items: Annotated[
            list[TermWithTranslation],
            Field(description="Terms to create, each with its translation (at least one)"),
        ],
        project_id: ProjectIdArg = None,
    ) -> str:
        logger.debug(f"add_terms_with_translations called with {len(items)} item(s) for '{language}'")
        params = parse_input(
            AddTermsWithTranslationsInput, project_id=project_id, language=language, items=items
        )
        return render(await operations.add_terms_with_translations(remote, config, params))

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    @mcp.tool(
        description=(
            "Add translations for EXISTING terms in a language (does not overwrite). Use this only when "
            "terms already exist. If you need to create new terms AND add their translations, prefer "
            f"using add_terms_with_translations instead. {CONTEXT_HINT}"
        )
    )
    async def add_translations(
        language: Annotated[str, Field(description="Language code, e.g. 'en' or 'pt-br'")],
        items: Annotated[list[TranslationItem], Field(description="Translations to add (at least one)")],
        project_id: ProjectIdArg = None,
    ) -> str:
        logger.debug(f"add_translations called with {len(items)} item(s) for '{language}'")
        params = parse_input(TranslationsInput, project_id=project_id, language=language, items=items)
        return render(await operations.add_translations(remote, config, params))

    @mcp.tool(description=f"Update/overwrite translations for a language. {CONTEXT_HINT}")
    async def update_translations(
        language: Annotated[str, Field(description="Language code, e.g. 'en' or 'pt-br'")],
        items: Annotated[list[TranslationItem], Field(description="Translations to write (at least one)")],
        project_id: ProjectIdArg = None,
    ) -> str:
        logger.debug(f"update_translations called with {len(items)} item(s) for '{language}'")
        params = parse_input(TranslationsInput, project_id=project_id, language=language, items=items)
        return render(await operations.update_translations(remote, config, params))

    # ------------------------------------------------------------------
    # Languages
    # ------------------------------------------------------------------

    @mcp.tool(description="List languages in the project.")
    async def list_languages(project_id: ProjectIdArg = None) -> str:
        params = parse_input(ListLanguagesInput, project_id=project_id)
        return render(await operations.list_languages(remote, config, params))

    @mcp.tool(
        description=(
            "List all available languages that POEditor supports "
            "(not project-specific, but all possible language codes)."
        )
    )
    async def list_available_languages() -> str:
        return render(await operations.list_available_languages(remote))

    @mcp.tool(
        description="Add a new language to the project. Provide the language code (e.g., 'en', 'de', 'fr')."
    )
    async def add_language(
        language: Annotated[str, Field(description="Language code to add, e.g. 'de'")],
        project_id: ProjectIdArg = None,
    ) -> str:
        params = parse_input(AddLanguageInput, project_id=project_id, language=language)
        return render(await operations.add_language(remote, config, params))

    logger.debug(f"✅ POEditor tools registered on '{SERVER_NAME}'")
    return mcp


def main() -> None:
    """Main entry point for the POEditor MCP Server."""
    # must precede basicConfig: .env may set POEDITOR_LOG_LEVEL
    dotenv_loaded = load_dotenv()

    logging.basicConfig(
        level=os.getenv("POEDITOR_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    if not dotenv_loaded:
        logger.warning(".env file not found, reading configuration from the environment only")

    try:
        config = POEditorConfig.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(
        f"Starting {SERVER_NAME} (api_base={config.api_base}, default project={config.project_id or 'none'})"
    )
    create_server(config).run()


if __name__ == "__main__":
    main()
