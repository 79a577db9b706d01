# WORKFLOW: Record schema registry for the dump's XML tables.
# Used by: xml_reader (attribute decoding), pipeline (entity construction)
# Contents:
# 1. Semantic field types and their attribute parsers
# 2. One ordered field list per entity kind (attribute name, field name, type)
# 3. TABLES - entity kind -> table file name, schema and entity class
#
# Schemas are plain data resolved once at import time, never per record.

"""
Record schema registry for the dump's XML tables.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, NamedTuple, Tuple, Type
from uuid import UUID

from etl.entities import (
    Badge, Comment, DumpEntity, Post, PostHistory, PostLink, Tag, User, Vote
)

# Semantic types
INTEGER = "integer"
OPTIONAL_INTEGER = "optional-integer"
STRING = "string"
OPTIONAL_STRING = "optional-string"
BOOLEAN = "boolean"
TIMESTAMP = "timestamp"
OPTIONAL_TIMESTAMP = "optional-timestamp"
STRING_LIST = "string-list"
GUID = "guid"

OPTIONAL_TYPES = frozenset({OPTIONAL_INTEGER, OPTIONAL_STRING, OPTIONAL_TIMESTAMP, STRING_LIST})

TAG_DELIMITER = "|"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an export timestamp such as ``2008-07-31T21:42:52.667``.

    The wall-clock value is taken as UTC as-is; no conversion is applied.
    """
    parsed = datetime.fromisoformat(value.strip())
    return parsed.replace(tzinfo=timezone.utc)


def parse_boolean(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


def parse_string_list(value: str) -> List[str]:
    return [part for part in value.split(TAG_DELIMITER) if part]


PARSERS: Dict[str, Callable[[str], object]] = {
    INTEGER: int,
    OPTIONAL_INTEGER: int,
    STRING: str,
    OPTIONAL_STRING: str,
    BOOLEAN: parse_boolean,
    TIMESTAMP: parse_timestamp,
    OPTIONAL_TIMESTAMP: parse_timestamp,
    STRING_LIST: parse_string_list,
    GUID: UUID,
}


class FieldSpec(NamedTuple):
    """One attribute of a record: export name, entity field name, semantic type."""
    attribute: str
    name: str
    type: str

    @property
    def optional(self) -> bool:
        return self.type in OPTIONAL_TYPES

    @property
    def parser(self) -> Callable[[str], object]:
        return PARSERS[self.type]


def _fields(*specs: Tuple[str, str, str]) -> Tuple[FieldSpec, ...]:
    return tuple(FieldSpec(*spec) for spec in specs)


USER_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("DisplayName", "display_name", STRING),
    ("Reputation", "reputation", INTEGER),
    ("WebsiteUrl", "website_url", OPTIONAL_STRING),
    ("Location", "location", OPTIONAL_STRING),
    ("AboutMe", "about_me", OPTIONAL_STRING),
    ("Views", "views", INTEGER),
    ("UpVotes", "up_votes", INTEGER),
    ("DownVotes", "down_votes", INTEGER),
    ("AccountId", "account_id", OPTIONAL_INTEGER),
    ("CreationDate", "creation_date", TIMESTAMP),
    ("LastAccessDate", "last_access_date", TIMESTAMP),
)

BADGE_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("UserId", "user_id", INTEGER),
    ("Name", "name", STRING),
    ("Class", "class_", INTEGER),
    ("TagBased", "tag_based", BOOLEAN),
    ("Date", "date", TIMESTAMP),
)

POST_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("PostTypeId", "post_type_id", INTEGER),
    ("ParentId", "parent_id", OPTIONAL_INTEGER),
    ("AcceptedAnswerId", "accepted_answer_id", OPTIONAL_INTEGER),
    ("OwnerUserId", "owner_user_id", OPTIONAL_INTEGER),
    ("OwnerDisplayName", "owner_display_name", OPTIONAL_STRING),
    ("LastEditorUserId", "last_editor_user_id", OPTIONAL_INTEGER),
    ("LastEditorDisplayName", "last_editor_display_name", OPTIONAL_STRING),
    ("Score", "score", INTEGER),
    ("ViewCount", "view_count", OPTIONAL_INTEGER),
    ("AnswerCount", "answer_count", OPTIONAL_INTEGER),
    ("CommentCount", "comment_count", OPTIONAL_INTEGER),
    ("FavoriteCount", "favorite_count", OPTIONAL_INTEGER),
    ("ContentLicense", "content_license", STRING),
    ("Tags", "tags", STRING_LIST),
    ("Title", "title", OPTIONAL_STRING),
    ("Body", "body", STRING),
    ("CreationDate", "creation_date", TIMESTAMP),
    ("LastEditDate", "last_edit_date", OPTIONAL_TIMESTAMP),
    ("LastActivityDate", "last_activity_date", TIMESTAMP),
    ("ClosedDate", "closed_date", OPTIONAL_TIMESTAMP),
    ("CommunityOwnedDate", "community_owned_date", OPTIONAL_TIMESTAMP),
)

POST_HISTORY_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("PostId", "post_id", INTEGER),
    ("PostHistoryTypeId", "post_history_type_id", INTEGER),
    ("RevisionGUID", "revision_guid", GUID),
    ("UserId", "user_id", OPTIONAL_INTEGER),
    ("UserDisplayName", "user_display_name", OPTIONAL_STRING),
    ("ContentLicense", "content_license", OPTIONAL_STRING),
    ("Text", "text", OPTIONAL_STRING),
    ("Comment", "comment", OPTIONAL_STRING),
    ("CreationDate", "creation_date", TIMESTAMP),
)

COMMENT_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("PostId", "post_id", INTEGER),
    ("Score", "score", INTEGER),
    ("Text", "text", STRING),
    ("CreationDate", "creation_date", TIMESTAMP),
    ("UserDisplayName", "user_display_name", OPTIONAL_STRING),
    ("UserId", "user_id", OPTIONAL_INTEGER),
    ("ContentLicense", "content_license", OPTIONAL_STRING),
)

POST_LINK_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("CreationDate", "creation_date", TIMESTAMP),
    ("PostId", "post_id", INTEGER),
    ("RelatedPostId", "related_post_id", INTEGER),
    ("LinkTypeId", "link_type_id", INTEGER),
)

TAG_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("TagName", "tag_name", STRING),
    ("Count", "count", INTEGER),
    ("ExcerptPostId", "excerpt_post_id", OPTIONAL_INTEGER),
    ("WikiPostId", "wiki_post_id", OPTIONAL_INTEGER),
)

VOTE_FIELDS = _fields(
    ("Id", "id", INTEGER),
    ("PostId", "post_id", INTEGER),
    ("VoteTypeId", "vote_type_id", INTEGER),
    ("UserId", "user_id", OPTIONAL_INTEGER),
    ("CreationDate", "creation_date", TIMESTAMP),
    ("BountyAmount", "bounty_amount", OPTIONAL_INTEGER),
)


class TableSpec(NamedTuple):
    kind: str
    file_name: str
    fields: Tuple[FieldSpec, ...]
    entity: Type[DumpEntity]


# Entity kinds in import order.
TABLES: Dict[str, TableSpec] = {
    spec.kind: spec for spec in (
        TableSpec("User", "Users.xml", USER_FIELDS, User),
        TableSpec("Badge", "Badges.xml", BADGE_FIELDS, Badge),
        TableSpec("Post", "Posts.xml", POST_FIELDS, Post),
        TableSpec("PostHistory", "PostHistory.xml", POST_HISTORY_FIELDS, PostHistory),
        TableSpec("Comment", "Comments.xml", COMMENT_FIELDS, Comment),
        TableSpec("PostLink", "PostLinks.xml", POST_LINK_FIELDS, PostLink),
        TableSpec("Tag", "Tags.xml", TAG_FIELDS, Tag),
        TableSpec("Vote", "Votes.xml", VOTE_FIELDS, Vote),
    )
}

ENTITY_KINDS = tuple(TABLES)


def get_schema(kind: str) -> Tuple[FieldSpec, ...]:
    """
    Return the ordered field list for an entity kind.

    Args:
        kind: Entity kind name, e.g. "Post"

    Returns:
        Tuple of FieldSpec in export attribute order
    """
    return TABLES[kind].fields


def get_table(kind: str) -> TableSpec:
    return TABLES[kind]
