"""
Configuration for the tabcsv.io module.

Defines CsvSettings, a frozen dataclass carrying the CSV formatting options and runtime knobs
(text encoding, parse-error policy). Defaults mirror tabcsv.core.constants; unset options
are left to the schema compiler's documented defaults.

Loading precedence: environment > TOML > defaults.
- Environment: TABCSV_FIELD_DELIMITER, TABCSV_QUOTE_CHARACTER, TABCSV_QUOTING_DISABLED,
  TABCSV_ESCAPE_CHARACTER, TABCSV_ALLOW_COMMENTS, TABCSV_ARRAY_ELEMENT_DELIMITER,
  TABCSV_NULL_LITERAL, TABCSV_IGNORE_PARSE_ERRORS, TABCSV_ENCODING.
- TOML: ./tabcsv.toml ([csv] table or top-level keys), then ./pyproject.toml under
  [tool.tabcsv.csv].

Notes
- Keys in mappings may use either snake_case field names or camelCase option names.
"""

from __future__ import annotations

import codecs
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from tabcsv.core.constants import (
    ALLOW_COMMENTS,
    ARRAY_ELEMENT_DELIMITER,
    DISABLE_QUOTE_CHARACTER,
    ESCAPE_CHARACTER,
    FIELD_DELIMITER,
    IGNORE_PARSE_ERRORS,
    NULL_LITERAL,
    QUOTE_CHARACTER,
)

from .errors import IoConfigError

# field name -> option key
_OPTION_KEYS: dict[str, str] = {
    "field_delimiter": FIELD_DELIMITER,
    "quote_character": QUOTE_CHARACTER,
    "quoting_disabled": DISABLE_QUOTE_CHARACTER,
    "escape_character": ESCAPE_CHARACTER,
    "allow_comments": ALLOW_COMMENTS,
    "array_element_delimiter": ARRAY_ELEMENT_DELIMITER,
    "null_literal": NULL_LITERAL,
    "ignore_parse_errors": IGNORE_PARSE_ERRORS,
}
_BOOL_FIELDS = {"quoting_disabled", "allow_comments", "ignore_parse_errors"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class CsvSettings:
    """
    Runtime settings for CSV decoding/encoding.

    Attributes:
        field_delimiter (str | None): Raw delimiter (escapes like "\\\\t" allowed).
        quote_character (str | None): Quote character.
        quoting_disabled (bool): Disable quoting (quote_character becomes inert).
        escape_character (str | None): Escape character.
        allow_comments (bool): Skip "#" lines on read.
        array_element_delimiter (str | None): In-cell separator for ARRAY/ROW columns.
        null_literal (str | None): Null sentinel.
        ignore_parse_errors (bool): Decode leniently (skip/null bad records).
        encoding (str): Text encoding for files.

    Examples:
        >>> CsvSettings(field_delimiter="|").to_options()
        {'fieldDelimiter': '|'}
    """

    field_delimiter: str | None = None
    quote_character: str | None = None
    quoting_disabled: bool = False
    escape_character: str | None = None
    allow_comments: bool = False
    array_element_delimiter: str | None = None
    null_literal: str | None = None
    ignore_parse_errors: bool = False
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise IoConfigError(f"unknown encoding {self.encoding!r}") from exc

    def to_options(self) -> dict[str, Any]:
        """Return the camelCase option map, omitting unset and default-false options."""
        out: dict[str, Any] = {}
        for name, key in _OPTION_KEYS.items():
            value = getattr(self, name)
            if value is None or value is False:
                continue
            out[key] = value
        return out

    @classmethod
    def _apply_mapping(cls, base: CsvSettings, cfg: dict[str, Any] | None) -> CsvSettings:
        """Apply a loose config mapping onto CsvSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        by_key = {key: name for name, key in _OPTION_KEYS.items()}
        known = {f.name for f in fields(cls)}
        updates: dict[str, Any] = {}
        for raw_key, value in cfg.items():
            name = by_key.get(raw_key, raw_key)
            if name not in known:
                continue
            if name in _BOOL_FIELDS:
                updates[name] = _bool(value)
            elif value is not None:
                updates[name] = str(value)
        return replace(base, **updates)

    @classmethod
    def from_env(cls, base: CsvSettings | None = None, prefix: str = "TABCSV_") -> CsvSettings:
        """
        Build CsvSettings from environment variables. Precedence is env > base > defaults.

        Empty variables are ignored, except TABCSV_NULL_LITERAL, where "" is a valid literal.
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for f in fields(cls):
            v = os.getenv(prefix + f.name.upper())
            if v is None:
                continue
            if v == "" and f.name != "null_literal":
                continue
            mapping[f.name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> CsvSettings:
        """
        Build CsvSettings from a TOML file.

        Search order when `path` is None:
            1) ./tabcsv.toml (with either a [csv] table or direct keys)
            2) ./pyproject.toml under [tool.tabcsv.csv]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If a candidate file exists but is not valid TOML.
        """
        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "tabcsv.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                section = data.get("tool", {}).get("tabcsv", {}).get("csv")
                cfg = section if isinstance(section, dict) else None
            elif isinstance(data.get("csv"), dict):
                cfg = data["csv"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(cls(), cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> CsvSettings:
        """
        Load CsvSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (tabcsv.toml,
                pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
