"""
Input records for the POEditor tools.

Each tool's arguments are parsed into one of these models before any payload
is built, so invalid input never reaches the HTTP adapter.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, ValidationError

from .exceptions import InputValidationError

ListField = Literal["term", "context", "translation"]

ProjectId = PositiveInt


class InputModel(BaseModel):
    """Base for tool input records. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class PluralForms(InputModel):
    """Plural translation keyed by CLDR plural category.

    Only the categories that are set are sent to POEditor.
    """

    zero: str | None = None
    one: str | None = None
    two: str | None = None
    few: str | None = None
    many: str | None = None
    other: str | None = None

    def as_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class TermInput(InputModel):
    """A new term. Identity is the pair (term, context)."""

    term: str = Field(..., min_length=1, description="Term text")
    context: str = Field(default="", description="Disambiguating context; empty string when absent")
    reference: str | None = Field(default=None, description="Reference, e.g. a source file location")
    comment: str | None = Field(default=None, description="Free-text comment for translators")
    tags: list[str] | None = Field(default=None, description="Tags attached to the term")
    plural: str | None = Field(default=None, description="Plural form template")


class TranslationItem(InputModel):
    """A translation for an existing term in one language."""

    term: str = Field(..., min_length=1, description="Term text, exactly as created")
    context: str = Field(default="", description="Context the term was created with")
    content: str = Field(default="", description="Translation text (ignored when plural is set)")
    fuzzy: bool = Field(default=False, description="Mark the translation as needing review")
    plural: PluralForms | None = Field(default=None, description="Plural forms instead of content")


class TranslationContent(InputModel):
    """The translation half of a term-with-translation item."""

    content: str = Field(default="", description="Translation text (ignored when plural is set)")
    fuzzy: bool = Field(default=False, description="Mark the translation as needing review")
    plural: PluralForms | None = Field(default=None, description="Plural forms instead of content")


class TermWithTranslation(InputModel):
    """A new term together with its translation in the target language."""

    term: str = Field(..., min_length=1, description="Term text")
    context: str = Field(default="", description="Disambiguating context; empty string when absent")
    reference: str | None = Field(default=None, description="Reference, e.g. a source file location")
    tags: list[str] | None = Field(default=None, description="Tags attached to the term")
    translation: TranslationContent = Field(..., description="Translation for the new term")


class ProjectInput(InputModel):
    project_id: ProjectId | None = Field(default=None, description="POEditor project id")


class AddTermsInput(ProjectInput):
    items: list[TermInput] = Field(..., min_length=1)


class TranslationsInput(ProjectInput):
    """Shared by add_translations and update_translations."""

    language: str = Field(..., min_length=2, description="Language code, e.g. 'en' or 'pt-br'")
    items: list[TranslationItem] = Field(..., min_length=1)


class ListTermsInput(ProjectInput):
    language: str | None = Field(default=None, min_length=2, description="Include translations for this language")
    limit: PositiveInt | None = Field(default=None, description="Maximum number of terms to return")
    offset: NonNegativeInt = Field(default=0, description="Number of matching terms to skip")
    search: str | None = Field(default=None, description="Case-insensitive substring filter")
    count_only: bool = Field(default=False, description="Return only the number of matching terms")
    fields: list[ListField] | None = Field(default=None, description="Keys to keep on each term")


class ListLanguagesInput(ProjectInput):
    pass


class AddLanguageInput(ProjectInput):
    language: str = Field(..., min_length=2, description="Language code to add")


class AddTermsWithTranslationsInput(ProjectInput):
    language: str = Field(..., min_length=2, description="Language code for the translations")
    items: list[TermWithTranslation] = Field(..., min_length=1)


M = TypeVar("M", bound=BaseModel)


def input_error(target: str, error: ValidationError) -> InputValidationError:
    """Convert a pydantic ValidationError into an InputValidationError for target."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in error.errors()
    )
    return InputValidationError(
        f"Invalid arguments for {target}: {problems}",
        details={"errors": error.errors(include_url=False)},
    )


def parse_input(model: type[M], **arguments: Any) -> M:
    """
    Validate tool arguments into a typed input record.

    Arguments that are None are dropped so model defaults apply.

    Raises:
        InputValidationError: If the arguments do not satisfy the model
    """
    values = {k: v for k, v in arguments.items() if v is not None}
    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise input_error(model.__name__, e) from None
