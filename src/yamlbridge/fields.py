"""Field tables for struct shapes, computed once per type and cached."""

from __future__ import annotations

import dataclasses
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Iterable

from .shapes import CustomShape, Shape, StructShape, Unknown, shape_of

logger = logging.getLogger(__name__)

TAG_KEY = "json"


@dataclass(frozen=True)
class FieldShape:
    """One serialized field of a struct."""

    name: str  # external name
    attr: str = ""  # attribute on the instance; defaults to name
    shape: Shape = Unknown
    omitempty: bool = False
    fold: str = field(init=False, default="")

    def __post_init__(self) -> None:
        if not self.attr:
            object.__setattr__(self, "attr", self.name)
        object.__setattr__(self, "fold", fold_name(self.name))

    @property
    def custom_decode(self) -> bool:
        return isinstance(self.shape, CustomShape)


@dataclass(frozen=True)
class FieldTable:
    """Ordered fields of a struct plus first-wins lookup indexes."""

    fields: tuple[FieldShape, ...]
    by_name: dict[str, FieldShape] = field(default_factory=dict, compare=False)
    by_fold: dict[str, FieldShape] = field(default_factory=dict, compare=False)

    @classmethod
    def build(cls, fields: Iterable[FieldShape]) -> FieldTable:
        kept: list[FieldShape] = []
        by_name: dict[str, FieldShape] = {}
        by_fold: dict[str, FieldShape] = {}
        for f in fields:
            if f.name in by_name:
                continue
            kept.append(f)
            by_name[f.name] = f
            by_fold.setdefault(f.fold, f)
        return cls(tuple(kept), by_name, by_fold)

    def lookup(self, key: str) -> FieldShape | None:
        """Exact name first, then case-insensitive."""
        f = self.by_name.get(key)
        if f is None:
            f = self.by_fold.get(fold_name(key))
        return f

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def fold_name(name: str) -> str:
    return name.casefold()


def parse_tag(tag: str) -> tuple[str, set[str]]:
    """Split ``"name,opt1,opt2"`` into the name and its options."""
    name, _, rest = tag.partition(",")
    opts = {o for o in rest.split(",") if o}
    return name, opts


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

_cache: dict[type, FieldTable] = {}
_registered: set[type] = set()


def resolve(shape: StructShape | type) -> FieldTable:
    """Return the Field Table of a struct shape, computing it on first use.

    Concurrent first calls may each compute a table; ``setdefault`` keeps
    the first stored one and every caller receives that same object.
    """
    cls = shape.cls if isinstance(shape, StructShape) else shape
    table = _cache.get(cls)
    if table is not None:
        return table
    table = _cache.setdefault(cls, _build_table(cls))
    logger.debug("resolved %d fields for %s", len(table), cls.__qualname__)
    return table


def register(cls: type, fields: Iterable[FieldShape]) -> FieldTable:
    """Declare the fields of a type that is not a dataclass."""
    table = FieldTable.build(fields)
    _cache[cls] = table
    _registered.add(cls)
    return table


def is_registered(cls: type) -> bool:
    return cls in _registered


def clear_cache() -> None:
    """Drop derived tables. Manually registered tables are kept."""
    for cls in list(_cache):
        if cls not in _registered:
            del _cache[cls]


def _build_table(cls: type) -> FieldTable:
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__qualname__} is neither a dataclass nor registered")

    hints = _type_hints(cls)
    declared: list[FieldShape] = []
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        tag = f.metadata.get(TAG_KEY, "")
        if tag == "-":
            continue
        name, opts = parse_tag(tag)
        declared.append(
            FieldShape(
                name=name or f.name,
                attr=f.name,
                shape=shape_of(hints.get(f.name, Any)),
                omitempty="omitempty" in opts,
            )
        )
    return FieldTable.build(declared)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # Unresolvable forward reference; fall back to the annotations that
        # are already real types.
        return {f.name: f.type for f in dataclasses.fields(cls) if not isinstance(f.type, str)}
