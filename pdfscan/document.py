# -----------------------------------------------------------------------------
# Copyright (C) 2025 Jeff Luster, mailto:jeff.luster96@gmail.com
# License: GNU AFFERO GPL 3.0, https://www.gnu.org/licenses/agpl-3.0.html
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Full license text can be found in the file "COPYING.txt".
# Full copyright text can be found in the file "main.py".
# -----------------------------------------------------------------------------

#!/usr/bin/env python3
"""
Immutable PDF object graph consumed by the detectors.

Backends translate whatever their parser produces into these types. Keys of
dictionaries and the content of names are raw bytes without the leading
slash, so ``/OpenAction`` is stored as ``b"OpenAction"``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class PdfName:
    value: bytes

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class PdfString:
    value: bytes

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class PdfNumber:
    value: Union[int, float]


@dataclass(frozen=True)
class PdfBoolean:
    value: bool


@dataclass(frozen=True)
class PdfNull:
    pass


@dataclass(frozen=True)
class PdfReference:
    object_id: int
    generation: int = 0


@dataclass(frozen=True)
class PdfArray:
    items: Tuple["PdfObject", ...] = ()

    def __iter__(self) -> Iterator["PdfObject"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class PdfDictionary:
    """Ordered, read-only mapping of name keys to objects."""

    entries: Mapping[bytes, "PdfObject"] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate it afterwards
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def has(self, key: bytes) -> bool:
        return key in self.entries

    def get(self, key: bytes, default=None) -> Optional["PdfObject"]:
        return self.entries.get(key, default)

    def items(self):
        return self.entries.items()

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class PdfStream:
    """A dictionary together with its raw, possibly encoded, payload."""

    dictionary: PdfDictionary
    content: bytes = b""

    @property
    def filters(self) -> List[str]:
        """Declared filter names in application order."""
        match self.dictionary.get(b"Filter"):
            case PdfName() as name:
                return [name.text]
            case PdfArray() as array:
                return [item.text for item in array if isinstance(item, PdfName)]
            case _:
                return []

    @property
    def filter_name(self) -> Optional[str]:
        filters = self.filters
        return filters[0] if filters else None

    @property
    def raw_length(self) -> int:
        return len(self.content)


PdfObject = Union[
    PdfDictionary,
    PdfStream,
    PdfName,
    PdfString,
    PdfArray,
    PdfNumber,
    PdfBoolean,
    PdfNull,
    PdfReference,
]


def as_dictionary(obj: Optional[PdfObject]) -> Optional[PdfDictionary]:
    """Return the dictionary of a Dictionary or Stream, None for anything else."""
    match obj:
        case PdfStream(dictionary=dictionary):
            return dictionary
        case PdfDictionary():
            return obj
        case _:
            return None


def object_size(obj: PdfObject) -> int:
    """Approximate serialized size of an object in bytes."""
    match obj:
        case PdfStream(dictionary=dictionary, content=content):
            return object_size(dictionary) + len(content)
        case PdfDictionary():
            return sum(len(key) + 1 + object_size(value) for key, value in obj.items())
        case PdfArray(items=items):
            return sum(object_size(item) for item in items)
        case PdfName(value=value) | PdfString(value=value):
            return len(value)
        case PdfNumber(value=value):
            return len(str(value))
        case PdfBoolean(value=value):
            return 4 if value else 5
        case PdfReference(object_id=object_id, generation=generation):
            return len(f"{object_id} {generation} R")
        case _:
            return 4


class Document:
    """Read-only object graph of a single PDF."""

    def __init__(self, objects: Optional[Mapping[int, PdfObject]] = None,
                 trailer: Optional[PdfDictionary] = None, size: Optional[int] = None):
        objects = dict(objects or {})
        for object_id in objects:
            if not isinstance(object_id, int) or object_id < 0:
                raise ValueError(f"Invalid object id: {object_id!r}")

        self._objects = MappingProxyType(dict(sorted(objects.items())))
        self._trailer = trailer if trailer is not None else PdfDictionary()
        self._size = size

    @property
    def objects(self) -> Mapping[int, PdfObject]:
        return self._objects

    @property
    def trailer(self) -> PdfDictionary:
        return self._trailer

    @property
    def size(self) -> int:
        """Size of the document in bytes, estimated from its objects if unknown."""
        if self._size is not None:
            return self._size
        return sum(object_size(obj) for obj in self._objects.values())

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Tuple[int, PdfObject]]:
        return iter(self._objects.items())

    def get(self, object_id: int) -> Optional[PdfObject]:
        return self._objects.get(object_id)

    def resolve(self, obj: Optional[PdfObject]) -> Optional[PdfObject]:
        """Follow a single reference hop; dangling references resolve to None."""
        match obj:
            case PdfReference(object_id=object_id):
                return self._objects.get(object_id)
            case _:
                return obj

    def info(self) -> Optional[PdfDictionary]:
        """The trailer's Info dictionary, if present and well formed."""
        return as_dictionary(self.resolve(self._trailer.get(b"Info")))

    def __repr__(self) -> str:
        return f"Document(objects={len(self._objects)}, size={self._size})"
