# WORKFLOW: Database models for the imported Q&A site dump.
# Used by: db/destination.py (table creation, bulk inserts), tests
# Models represent:
# 1. Lookup tables - badge_classes, post_types, post_history_types, link_types, vote_types
# 2. Dump tables - users, badges, posts, post_histories, comments, post_links, tags, votes
#
# Primary keys are the dump's own ids, never generated.
# The posts -> posts references (parent_id, accepted_answer_id) are not declared here:
# a post may reference one further down the table, so those constraints are added
# after loading (see DEFERRED_FOREIGN_KEYS). post_load_schema() builds those constraints
# and the indexes on foreign key columns.
#
# Data flow: XML -> ETL pipeline -> destination buffers -> these tables

from typing import List, Tuple

from sqlalchemy import (
    JSON, BigInteger, Boolean, Column, DateTime, ForeignKey, ForeignKeyConstraint, Index, Integer, MetaData,
    SmallInteger, String, Text, Uuid,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# Lookup tables

class BadgeClass(Base):
    __tablename__ = "badge_classes"

    id = Column(SmallInteger, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)


class PostType(Base):
    __tablename__ = "post_types"

    id = Column(SmallInteger, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)


class PostHistoryType(Base):
    __tablename__ = "post_history_types"

    id = Column(SmallInteger, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)


class LinkType(Base):
    __tablename__ = "link_types"

    id = Column(SmallInteger, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)


class VoteType(Base):
    __tablename__ = "vote_types"

    id = Column(SmallInteger, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)


# Dump tables

class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    display_name = Column(String(40), nullable=False)
    reputation = Column(Integer, nullable=False)
    website_url = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    about_me = Column(Text, nullable=True)
    views = Column(Integer, nullable=False)
    up_votes = Column(Integer, nullable=False)
    down_votes = Column(Integer, nullable=False)
    account_id = Column(BigInteger, nullable=True)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    last_access_date = Column(DateTime(timezone=True), nullable=False)


class Badge(Base):
    __tablename__ = "badges"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False)
    name = Column(String(50), nullable=False)
    class_ = Column("class", SmallInteger, ForeignKey("badge_classes.id"), nullable=False)
    tag_based = Column(Boolean, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)


class Post(Base):
    __tablename__ = "posts"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    post_type_id = Column(SmallInteger, ForeignKey("post_types.id"), nullable=False)
    parent_id = Column(BigInteger, nullable=True)  # -> posts.id, added after load
    accepted_answer_id = Column(BigInteger, nullable=True)  # -> posts.id, added after load
    owner_user_id = Column(BigInteger, ForeignKey("users.id"), nullable=True)
    owner_display_name = Column(String(40), nullable=True)
    last_editor_user_id = Column(BigInteger, ForeignKey("users.id"), nullable=True)
    last_editor_display_name = Column(String(40), nullable=True)
    score = Column(Integer, nullable=False)
    view_count = Column(Integer, nullable=True)
    answer_count = Column(Integer, nullable=True)
    comment_count = Column(Integer, nullable=True)
    favorite_count = Column(Integer, nullable=True)
    content_license = Column(String(30), nullable=False)
    tags = Column(JSON, nullable=True)  # Array of tag names
    title = Column(String(250), nullable=True)
    body = Column(Text, nullable=False)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    last_edit_date = Column(DateTime(timezone=True), nullable=True)
    last_activity_date = Column(DateTime(timezone=True), nullable=False)
    closed_date = Column(DateTime(timezone=True), nullable=True)
    community_owned_date = Column(DateTime(timezone=True), nullable=True)


class PostHistory(Base):
    __tablename__ = "post_histories"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    post_id = Column(BigInteger, ForeignKey("posts.id"), nullable=False)
    post_history_type_id = Column(SmallInteger, ForeignKey("post_history_types.id"), nullable=False)
    revision_guid = Column(Uuid, nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=True)
    user_display_name = Column(String(40), nullable=True)
    content_license = Column(String(30), nullable=True)
    text = Column(Text, nullable=True)
    comment = Column(String(400), nullable=True)
    creation_date = Column(DateTime(timezone=True), nullable=False)


class Comment(Base):
    __tablename__ = "comments"

    # No foreign keys: comments are loaded without integrity repair.
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    post_id = Column(BigInteger, nullable=False)
    score = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    user_display_name = Column(String(40), nullable=True)
    user_id = Column(BigInteger, nullable=True)
    content_license = Column(String(30), nullable=True)


class PostLink(Base):
    __tablename__ = "post_links"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    post_id = Column(BigInteger, nullable=False)
    related_post_id = Column(BigInteger, ForeignKey("posts.id"), nullable=False)
    link_type_id = Column(SmallInteger, ForeignKey("link_types.id"), nullable=False)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    tag_name = Column(String(35), nullable=False)
    count = Column(Integer, nullable=False)
    excerpt_post_id = Column(BigInteger, ForeignKey("posts.id"), nullable=True)
    wiki_post_id = Column(BigInteger, ForeignKey("posts.id"), nullable=True)


class Vote(Base):
    __tablename__ = "votes"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    post_id = Column(BigInteger, ForeignKey("posts.id"), nullable=False)
    vote_type_id = Column(SmallInteger, ForeignKey("vote_types.id"), nullable=False)
    user_id = Column(BigInteger, nullable=True)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    bounty_amount = Column(Integer, nullable=True)


MODELS = {
    "User": User,
    "Badge": Badge,
    "Post": Post,
    "PostHistory": PostHistory,
    "Comment": Comment,
    "PostLink": PostLink,
    "Tag": Tag,
    "Vote": Vote,
}

LOOKUP_MODELS = {
    "BadgeClass": BadgeClass,
    "PostType": PostType,
    "PostHistoryType": PostHistoryType,
    "LinkType": LinkType,
    "VoteType": VoteType,
}

# (table, column, referenced table, referenced column), added once all rows exist
DEFERRED_FOREIGN_KEYS = [
    ("posts", "parent_id", "posts", "id"),
    ("posts", "accepted_answer_id", "posts", "id"),
]


def post_load_schema() -> Tuple[List[Index], List[ForeignKeyConstraint]]:
    """
    Indexes and constraints created once every row is loaded.

    They are attached to a copy of the metadata, so create_all() on Base keeps
    building the tables without them.

    Returns:
        (one ix_<table>_<column> index per foreign key column, deferred posts -> posts constraints)
    """
    metadata = MetaData()
    tables = {table.name: table.to_metadata(metadata) for table in Base.metadata.sorted_tables}
    deferred = {(table, column) for table, column, _, _ in DEFERRED_FOREIGN_KEYS}

    indexes = [
        Index(f"ix_{table.name}_{column.name}", column)
        for table in tables.values()
        for column in table.columns
        if column.foreign_keys or (table.name, column.name) in deferred
    ]

    constraints = []
    for table, column, ref_table, ref_column in DEFERRED_FOREIGN_KEYS:
        constraint = ForeignKeyConstraint([column], [f"{ref_table}.{ref_column}"], name=f"fk_{table}_{column}")
        tables[table].append_constraint(constraint)
        constraints.append(constraint)

    return indexes, constraints
