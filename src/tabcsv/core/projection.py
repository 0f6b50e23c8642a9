"""
Column projection for the read path.

A Projection is an ordered tuple of index paths into a full RowType. A path of length one
selects a top-level column; a longer path selects a field nested inside ROW columns. Every
path becomes one top-level field of the produced row; nested paths are named by joining the
path's field names with "_".

Notes:
    - Paths must be valid positions into the full RowType; ROW-only traversal below the top.
    - An empty projection is valid and produces empty rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import ConfigurationError
from .types import LogicalType, RowField, RowType

__all__ = [
    "Projection",
]


@dataclass(frozen=True)
class Projection:
    """
    Ordered selection of (possibly nested) columns.

    Examples:
        >>> from tabcsv.core.types import RowType, RowField, integer, string
        >>> rt = RowType.of(RowField("a", integer()), RowField("b", string()), RowField("c", string()))
        >>> Projection.top_level([0, 2]).project(rt).field_names
        ('a', 'c')
    """

    paths: tuple[tuple[int, ...], ...]

    @classmethod
    def of(cls, paths: Iterable[Sequence[int]]) -> Projection:
        return cls(tuple(tuple(int(i) for i in p) for p in paths))

    @classmethod
    def top_level(cls, indices: Iterable[int]) -> Projection:
        return cls(tuple((int(i),) for i in indices))

    @classmethod
    def all(cls, row_type: RowType) -> Projection:
        return cls.top_level(range(len(row_type)))

    @property
    def is_nested(self) -> bool:
        return any(len(p) > 1 for p in self.paths)

    def validate(self, row_type: RowType) -> None:
        """
        Raises:
            ConfigurationError: If any path is empty or out of range, or descends into a
                non-ROW field.
        """
        for path in self.paths:
            self.resolve(row_type, path)

    @staticmethod
    def resolve(row_type: RowType, path: Sequence[int]) -> list[RowField]:
        """Return the chain of fields a path walks through, outermost first."""
        if not path:
            raise ConfigurationError("projection paths must be non-empty")
        chain: list[RowField] = []
        fields = row_type.fields
        for depth, idx in enumerate(path):
            if not 0 <= idx < len(fields):
                raise ConfigurationError(
                    f"projection index {idx} out of range at depth {depth} (size {len(fields)})"
                )
            f = fields[idx]
            chain.append(f)
            if depth < len(path) - 1:
                if f.type.kind is not LogicalType.ROW:
                    raise ConfigurationError(
                        f"projection path {tuple(path)} descends into non-row field {f.name!r}"
                    )
                fields = f.type.fields
        return chain

    def project(self, row_type: RowType) -> RowType:
        """Produce the RowType of rows decoded under this projection."""
        out: list[RowField] = []
        for path in self.paths:
            chain = self.resolve(row_type, path)
            leaf = chain[-1]
            if len(chain) == 1:
                out.append(leaf)
                continue
            # A nested leaf is nullable when any enclosing row is.
            nullable = any(f.type.nullable for f in chain)
            name = "_".join(f.name for f in chain)
            out.append(RowField(name, leaf.type.as_nullable(nullable)))
        return RowType(tuple(out))
