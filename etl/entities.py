# WORKFLOW: Typed entities for the Q&A site dump.
# Used by: Pipeline (construction from decoded rows), placeholders, destinations
# Entities:
# 1. Dynamic kinds - User, Badge, Post, PostHistory, Comment, PostLink, Tag, Vote
# 2. Lookup kinds - BadgeClass, PostType, PostHistoryType, LinkType, VoteType
#
# Data flow: XML row -> field map (xml_reader) -> entity -> destination
# Field names are snake_case; the export attribute names live in etl/schemas.py.

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DumpEntity(BaseModel):
    """Base for every entity handed to a destination."""
    model_config = ConfigDict(frozen=True)

    id: int


class User(DumpEntity):
    display_name: str
    reputation: int
    website_url: Optional[str] = None
    location: Optional[str] = None
    about_me: Optional[str] = None
    views: int
    up_votes: int
    down_votes: int
    account_id: Optional[int] = None
    creation_date: datetime
    last_access_date: datetime


class Badge(DumpEntity):
    user_id: int
    name: str
    class_: int
    tag_based: bool
    date: datetime


class Post(DumpEntity):
    post_type_id: int
    parent_id: Optional[int] = None
    accepted_answer_id: Optional[int] = None
    owner_user_id: Optional[int] = None
    owner_display_name: Optional[str] = None
    last_editor_user_id: Optional[int] = None
    last_editor_display_name: Optional[str] = None
    score: int
    view_count: Optional[int] = None
    answer_count: Optional[int] = None
    comment_count: Optional[int] = None
    favorite_count: Optional[int] = None
    content_license: str
    tags: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    body: str
    creation_date: datetime
    last_edit_date: Optional[datetime] = None
    last_activity_date: datetime
    closed_date: Optional[datetime] = None
    community_owned_date: Optional[datetime] = None


class PostHistory(DumpEntity):
    post_id: int
    post_history_type_id: int
    revision_guid: UUID
    user_id: Optional[int] = None
    user_display_name: Optional[str] = None
    content_license: Optional[str] = None
    text: Optional[str] = None
    comment: Optional[str] = None
    creation_date: datetime


class Comment(DumpEntity):
    post_id: int
    score: int
    text: str
    creation_date: datetime
    user_display_name: Optional[str] = None
    user_id: Optional[int] = None
    content_license: Optional[str] = None


class PostLink(DumpEntity):
    creation_date: datetime
    post_id: int
    related_post_id: int
    link_type_id: int


class Tag(DumpEntity):
    tag_name: str
    count: int
    excerpt_post_id: Optional[int] = None
    wiki_post_id: Optional[int] = None


class Vote(DumpEntity):
    post_id: int
    vote_type_id: int
    user_id: Optional[int] = None
    creation_date: datetime
    bounty_amount: Optional[int] = None


# Lookup kinds

class LookupEntity(DumpEntity):
    name: str


class BadgeClass(LookupEntity):
    pass


class PostType(LookupEntity):
    pass


class PostHistoryType(LookupEntity):
    pass


class LinkType(LookupEntity):
    pass


class VoteType(LookupEntity):
    pass
