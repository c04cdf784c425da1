# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse clang-format replacement XML and apply the replacements it describes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Final
from xml.etree.ElementTree import ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring
from pydantic import ValidationError

from ..errors import MalformedOutput
from ..logging import trace
from ..models import Replacement

LOGGER = logging.getLogger(__name__)

_REPLACEMENTS_TAG: Final[str] = "replacements"
_REPLACEMENT_TAG: Final[str] = "replacement"


def _int_attribute(value: str | None, name: str) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError as exc:
        raise MalformedOutput(f"replacement attribute {name}={value!r} is not an integer") from exc


def parse_replacements(xml: str) -> list[Replacement]:
    """Parse ``clang-format --output-replacements-xml`` output.

    An empty ``<replacements/>`` root means the file is already formatted and
    yields an empty list. Missing replacement text is read as ``""``.

    Raises:
        MalformedOutput: If the document does not parse or its root is not a
            ``replacements`` element.
    """

    trace(LOGGER, "parsing replacements xml:\n%s", xml)
    if not xml.strip():
        raise MalformedOutput("parse replacements xml failed: empty document")
    try:
        root = fromstring(xml)
    except (ParseError, DefusedXmlException) as exc:
        raise MalformedOutput(f"parse replacements xml failed: {exc}") from exc
    if root.tag != _REPLACEMENTS_TAG:
        raise MalformedOutput(f"parse replacements xml failed: root element is '{root.tag}', not 'replacements'")

    replacements: list[Replacement] = []
    for element in root.findall(_REPLACEMENT_TAG):
        try:
            replacement = Replacement(
                offset=_int_attribute(element.get("offset"), "offset"),
                length=_int_attribute(element.get("length"), "length"),
                data=element.text or "",
            )
        except ValidationError as exc:
            raise MalformedOutput(f"invalid replacement element: {exc}") from exc
        trace(LOGGER, "offset: %d, length: %d, data: %r", replacement.offset, replacement.length, replacement.data)
        replacements.append(replacement)
    return replacements


def apply_replacements(original: bytes, replacements: Iterable[Replacement]) -> bytes:
    """Return ``original`` with ``replacements`` spliced in.

    Offsets and lengths are byte based and refer to ``original``; the
    replacements must not overlap.

    Raises:
        ValueError: If two replacements overlap or one runs past the end.
    """

    ordered = sorted(replacements, key=lambda item: item.offset)
    chunks: list[bytes] = []
    cursor = 0
    for replacement in ordered:
        if replacement.offset < cursor:
            raise ValueError(f"overlapping replacement at offset {replacement.offset}")
        end = replacement.offset + replacement.length
        if end > len(original):
            raise ValueError(f"replacement at offset {replacement.offset} exceeds source length {len(original)}")
        chunks.append(original[cursor : replacement.offset])
        chunks.append(replacement.data.encode("utf-8"))
        cursor = end
    chunks.append(original[cursor:])
    return b"".join(chunks)


def line_lengths(source: bytes) -> list[int]:
    """Return the byte length of every line in ``source`` including its LF."""

    parts = source.split(b"\n")
    lengths = [len(part) + 1 for part in parts[:-1]]
    if parts[-1]:
        lengths.append(len(parts[-1]))
    return lengths


def offset_to_position(source: bytes | Sequence[int], offset: int) -> tuple[int, int] | None:
    """Map a 0-based byte ``offset`` to a 1-based ``(row, column)``.

    Args:
        source: File bytes, or the precomputed :func:`line_lengths` of them.
        offset: Byte offset as reported by clang-format.

    Returns:
        tuple[int, int] | None: Position of the byte, or ``None`` when the
        offset falls outside the file.
    """

    lengths = line_lengths(source) if isinstance(source, bytes) else source
    cursor = 0
    for row, length in enumerate(lengths, start=1):
        if cursor <= offset < cursor + length:
            return row, offset - cursor + 1
        cursor += length
    return None


__all__ = ["apply_replacements", "line_lengths", "offset_to_position", "parse_replacements"]
