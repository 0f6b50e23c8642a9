"""
Pydantic v2 model for textual CSV formatting options.

Responsibilities
- Validate the option map supplied by callers (camelCase keys) into an immutable record.
- Reject structurally invalid values (empty delimiter, empty quote/escape character).
- Ignore unknown keys; option-key allow-listing happens upstream of this package.

Notes
- Absent options stay None so the schema compiler can tell "not configured" from "default".
- Zero-IO (stdlib + pydantic only).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    ALLOW_COMMENTS,
    ARRAY_ELEMENT_DELIMITER,
    DISABLE_QUOTE_CHARACTER,
    ESCAPE_CHARACTER,
    FIELD_DELIMITER,
    IGNORE_PARSE_ERRORS,
    NULL_LITERAL,
    QUOTE_CHARACTER,
)
from .errors import ConfigurationError

__all__ = [
    "FormatOptions",
    "parse_options",
]


class FormatOptions(BaseModel):
    """
    Validated CSV formatting options.

    Attributes:
        field_delimiter (str | None): Raw column separator; backslash escapes are resolved by
            the compiler (alias ``fieldDelimiter``).
        quote_character (str | None): Quote character (alias ``quoteCharacter``).
        quoting_disabled (bool): Disable quoting entirely (alias ``quotingDisabled``).
        escape_character (str | None): Escape character (alias ``escapeCharacter``).
        allow_comments (bool | None): Skip ``#`` lines on read (alias ``allowComments``).
        array_element_delimiter (str | None): In-cell separator (alias ``arrayElementDelimiter``).
        null_literal (str | None): Null sentinel (alias ``nullLiteral``).
        ignore_parse_errors (bool): Lenient decoding (alias ``ignoreParseErrors``).

    Examples:
        >>> FormatOptions.model_validate({"fieldDelimiter": ";"}).field_delimiter
        ';'
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    field_delimiter: str | None = Field(default=None, alias=FIELD_DELIMITER, min_length=1)
    quote_character: str | None = Field(default=None, alias=QUOTE_CHARACTER, min_length=1)
    quoting_disabled: bool = Field(default=False, alias=DISABLE_QUOTE_CHARACTER)
    escape_character: str | None = Field(default=None, alias=ESCAPE_CHARACTER, min_length=1)
    allow_comments: bool | None = Field(default=None, alias=ALLOW_COMMENTS)
    array_element_delimiter: str | None = Field(
        default=None, alias=ARRAY_ELEMENT_DELIMITER, min_length=1
    )
    null_literal: str | None = Field(default=None, alias=NULL_LITERAL)
    ignore_parse_errors: bool = Field(default=False, alias=IGNORE_PARSE_ERRORS)


def parse_options(options: FormatOptions | Mapping[str, Any] | None) -> FormatOptions:
    """
    Coerce a mapping (or None) into FormatOptions.

    Raises:
        ConfigurationError: If any recognized option value is invalid.
    """
    if options is None:
        return FormatOptions()
    if isinstance(options, FormatOptions):
        return options
    try:
        return FormatOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid CSV format options: {exc}") from exc
