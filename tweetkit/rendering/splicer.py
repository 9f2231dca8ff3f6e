"""Splice entity replacements into tweet text."""

import logging
from collections.abc import Iterable, Mapping
from typing import Union

from ..errors import OutOfRangeSpliceError, OverlappingSpliceError, SpliceError
from ..models.entity import EntityRecord

logger = logging.getLogger(__name__)

Records = Union[Iterable[EntityRecord], Mapping[int, EntityRecord]]


def _check_span(record: EntityRecord, text_length: int, limit: int) -> None:
    """Raise if the record cannot be applied.

    Args:
        record: Record about to be applied
        text_length: Length of the original text
        limit: Start offset of the last applied record (text_length if none)
    """
    if record.start < 0 or record.end > text_length or record.end < record.start:
        raise OutOfRangeSpliceError(
            f"Span [{record.start}, {record.end}) is outside text of length {text_length}"
        )
    if record.end > limit:
        raise OverlappingSpliceError(
            f"Span [{record.start}, {record.end}) overlaps a span starting at {limit}"
        )


def splice_text(text: str, records: Records, strict: bool = True) -> str:
    """Replace every record's span of the text with its replacement.

    Records are applied by descending start offset, so each replacement
    happens after every position still to be processed and the offsets of
    the original text stay valid for the whole pass.

    Args:
        text: Original tweet text
        records: EntityRecords, or the start-keyed mapping from collect_entities
        strict: Raise on a bad record instead of skipping it

    Returns:
        Text with all applicable spans replaced

    Raises:
        OutOfRangeSpliceError: If a span is outside the text (strict only)
        OverlappingSpliceError: If two spans overlap (strict only)
    """
    if isinstance(records, Mapping):
        records = records.values()

    # sorted() is stable, so equal starts keep their inbound order
    ordered = sorted(records, key=lambda r: r.start, reverse=True)
    if not ordered:
        return text

    text_length = len(text)
    limit = text_length
    parts = []
    for record in ordered:
        try:
            _check_span(record, text_length, limit)
        except SpliceError as e:
            if strict:
                raise
            logger.warning(f"Skipping entity: {e}")
            continue

        parts.append(text[record.end:limit])
        parts.append(record.replacement)
        limit = record.start

    parts.append(text[:limit])
    return "".join(reversed(parts))
