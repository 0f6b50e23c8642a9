"""
tabcsv core defaults.

Defines the option keys understood by the schema compiler, their documented defaults, and the
sampling cap used by the row-count estimator. This module is zero-IO and uses only the Python
standard library.

Notes:
    - Option keys use the camelCase spelling of the upstream configuration layer.
    - Changing a default changes the wire format of every schema compiled without that option.
"""

from __future__ import annotations

__all__ = [
    "FORMAT_IDENTIFIER",
    "FIELD_DELIMITER",
    "QUOTE_CHARACTER",
    "DISABLE_QUOTE_CHARACTER",
    "ESCAPE_CHARACTER",
    "ALLOW_COMMENTS",
    "ARRAY_ELEMENT_DELIMITER",
    "NULL_LITERAL",
    "IGNORE_PARSE_ERRORS",
    "DEFAULT_FIELD_DELIMITER",
    "DEFAULT_QUOTE_CHARACTER",
    "DEFAULT_ARRAY_ELEMENT_DELIMITER",
    "DEFAULT_LINE_SEPARATOR",
    "COMMENT_MARKER",
    "SAMPLE_LINE_CAP",
]

FORMAT_IDENTIFIER: str = "csv"

# Option keys (camelCase, as supplied by callers).
FIELD_DELIMITER: str = "fieldDelimiter"
QUOTE_CHARACTER: str = "quoteCharacter"
DISABLE_QUOTE_CHARACTER: str = "quotingDisabled"
ESCAPE_CHARACTER: str = "escapeCharacter"
ALLOW_COMMENTS: str = "allowComments"
ARRAY_ELEMENT_DELIMITER: str = "arrayElementDelimiter"
NULL_LITERAL: str = "nullLiteral"
IGNORE_PARSE_ERRORS: str = "ignoreParseErrors"

DEFAULT_FIELD_DELIMITER: str = ","
DEFAULT_QUOTE_CHARACTER: str = '"'
DEFAULT_ARRAY_ELEMENT_DELIMITER: str = ";"
DEFAULT_LINE_SEPARATOR: str = "\n"
COMMENT_MARKER: str = "#"

# Maximum number of lines the estimator reads across all files combined.
SAMPLE_LINE_CAP: int = 100
