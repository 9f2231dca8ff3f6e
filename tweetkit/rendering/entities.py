"""Entity collection: turn raw tweet entities into splice records."""

import logging
from html import escape
from typing import Callable, Dict, Optional
from urllib.parse import quote

from pydantic import ValidationError

from ..errors import MalformedEntityError
from ..models.entity import EntityRecord

logger = logging.getLogger(__name__)

DEFAULT_LINK_BASE_URL = "https://twitter.com"


def _hashtag_markup(entity: dict, base_url: str) -> str:
    tag = entity["text"]
    href = f"{base_url}/search?q=%23{quote(tag.lower())}"
    return f'<a href="{escape(href)}">#{escape(tag)}</a>'


def _url_markup(entity: dict, base_url: str) -> str:
    expanded_url = escape(entity["expanded_url"])
    return f'<a href="{expanded_url}" title="{expanded_url}">{escape(entity["display_url"])}</a>'


def _mention_markup(entity: dict, base_url: str) -> str:
    screen_name = entity["screen_name"]
    href = f"{base_url}/{quote(screen_name.lower())}"
    title = escape(entity.get("name") or screen_name)
    return f'<a href="{escape(href)}" title="{title}">@{escape(screen_name)}</a>'


# Merge order; a later group overwrites an earlier one on a shared start offset.
ENTITY_GROUPS: Dict[str, Callable[[dict, str], str]] = {
    "hashtags": _hashtag_markup,
    "urls": _url_markup,
    "user_mentions": _mention_markup,
    "media": _url_markup,
}


def build_record(kind: str, entity: dict, base_url: str = DEFAULT_LINK_BASE_URL) -> EntityRecord:
    """Build the splice record for a single entity.

    Args:
        kind: Entity group name (e.g., "hashtags", "urls")
        entity: Raw entity dict from the API, with an "indices" pair
        base_url: Base URL used for hashtag and mention links

    Returns:
        EntityRecord covering the entity's span

    Raises:
        MalformedEntityError: If indices or a required field are missing
    """
    indices = entity.get("indices") if isinstance(entity, dict) else None
    if not isinstance(indices, (list, tuple)) or len(indices) != 2:
        raise MalformedEntityError(f"{kind} entity has no valid indices: {entity!r}")

    try:
        replacement = ENTITY_GROUPS[kind](entity, base_url.rstrip("/"))
    except (KeyError, AttributeError, TypeError) as e:
        raise MalformedEntityError(f"{kind} entity is missing a field: {e}") from e

    try:
        return EntityRecord(start=indices[0], end=indices[1], replacement=replacement)
    except ValidationError as e:
        raise MalformedEntityError(f"{kind} entity has an invalid range {indices!r}: {e}") from e


def collect_entities(
    entity_groups: Optional[dict], base_url: str = DEFAULT_LINK_BASE_URL
) -> Dict[int, EntityRecord]:
    """Collect all entities of a tweet into records keyed by start offset.

    Groups are merged in hashtags, urls, user_mentions, media order. When two
    entities share a start offset the one merged last wins.

    Args:
        entity_groups: The tweet's "entities" mapping (may be None)
        base_url: Base URL used for hashtag and mention links

    Returns:
        Mapping of start offset to EntityRecord, in no particular order

    Raises:
        MalformedEntityError: If any entity is malformed
    """
    records: Dict[int, EntityRecord] = {}
    if not entity_groups:
        return records
    if not isinstance(entity_groups, dict):
        raise MalformedEntityError(
            f"Entities must be a mapping of groups, got {type(entity_groups).__name__}"
        )

    for kind in ENTITY_GROUPS:
        for entity in entity_groups.get(kind) or []:
            record = build_record(kind, entity, base_url)
            if record.start in records:
                logger.debug(
                    f"Entity at offset {record.start} replaced by later {kind} entity"
                )
            records[record.start] = record

    return records
