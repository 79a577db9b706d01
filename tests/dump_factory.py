"""Helpers that build small dump archives and record what a destination receives.

Row helpers return attribute dicts using the export's attribute names, with
defaults for every required attribute; pass keyword overrides (``None``
removes an attribute). ``write_zip`` turns ``{"Posts.xml": [rows...]}`` into a
zip archive on disk.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict, List, Optional
from xml.sax.saxutils import quoteattr

from etl.destination import DumpDestination

DATE = "2020-01-01T00:00:00.000"

ROOT_TAGS = {
    "Users.xml": "users",
    "Badges.xml": "badges",
    "Posts.xml": "posts",
    "PostHistory.xml": "posthistory",
    "Comments.xml": "comments",
    "PostLinks.xml": "postlinks",
    "Tags.xml": "tags",
    "Votes.xml": "votes",
}


def _row(defaults: dict, overrides: dict) -> Dict[str, str]:
    attrs = {**defaults, **overrides}
    return {key: str(value) for key, value in attrs.items() if value is not None}


def user_row(id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "Reputation": 1, "CreationDate": DATE, "DisplayName": f"user{id}",
        "LastAccessDate": DATE, "Views": 0, "UpVotes": 0, "DownVotes": 0, "AccountId": id,
    }, overrides)


def badge_row(id: int, user_id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "UserId": user_id, "Name": "Student", "Date": DATE, "Class": 3, "TagBased": "False",
    }, overrides)


def post_row(id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "PostTypeId": 1, "CreationDate": DATE, "Score": 0, "Body": f"<p>post {id}</p>",
        "LastActivityDate": DATE, "ContentLicense": "CC BY-SA 4.0",
    }, overrides)


def post_history_row(id: int, post_id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "PostHistoryTypeId": 2, "PostId": post_id,
        "RevisionGUID": "c4e6b6a2-1f0e-4c7b-9a4e-6f2d8b1e0a11", "CreationDate": DATE,
        "Text": "text", "ContentLicense": "CC BY-SA 4.0",
    }, overrides)


def comment_row(id: int, post_id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "PostId": post_id, "Score": 0, "Text": "nice", "CreationDate": DATE,
    }, overrides)


def post_link_row(id: int, post_id: int, related_post_id: int, **overrides) -> Dict[str, str]:
    return _row({
        "Id": id, "CreationDate": DATE, "PostId": post_id, "RelatedPostId": related_post_id, "LinkTypeId": 1,
    }, overrides)


def tag_row(id: int, **overrides) -> Dict[str, str]:
    return _row({"Id": id, "TagName": f"tag{id}", "Count": 1}, overrides)


def vote_row(id: int, post_id: int, **overrides) -> Dict[str, str]:
    return _row({"Id": id, "PostId": post_id, "VoteTypeId": 2, "CreationDate": DATE}, overrides)


def table_xml(file_name: str, rows: List[Dict[str, str]]) -> bytes:
    root = ROOT_TAGS.get(file_name, "rows")
    lines = ['<?xml version="1.0" encoding="utf-8"?>', f"<{root}>"]
    for row in rows:
        attrs = " ".join(f"{key}={quoteattr(value)}" for key, value in row.items())
        lines.append(f"  <row {attrs} />")
    lines.append(f"</{root}>")
    return "\n".join(lines).encode("utf-8")


def write_zip(path: Path, tables: Dict[str, List[Dict[str, str]]], prefix: str = "") -> str:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for file_name, rows in tables.items():
            archive.writestr(prefix + file_name, table_xml(file_name, rows))
    return str(path)


class RecordingDestination(DumpDestination):
    """Destination that remembers every call, in order."""

    def __init__(self):
        self.events: List[tuple] = []
        self.entities: List[tuple] = []
        self.seeded = 0
        self.closed: Optional[bool] = None

    def write_seed_data(self) -> None:
        self.seeded += 1
        self.events.append(("seed",))

    def _record(self, kind, entity):
        self.events.append(("store", kind, entity.id))
        self.entities.append((kind, entity))

    def store_user(self, user):
        self._record("User", user)

    def store_badge(self, badge):
        self._record("Badge", badge)

    def store_post(self, post):
        self._record("Post", post)

    def store_post_history(self, post_history):
        self._record("PostHistory", post_history)

    def store_comment(self, comment):
        self._record("Comment", comment)

    def store_post_link(self, post_link):
        self._record("PostLink", post_link)

    def store_tag(self, tag):
        self._record("Tag", tag)

    def store_vote(self, vote):
        self._record("Vote", vote)

    def flush(self):
        self.events.append(("flush",))

    def close(self, complete: bool = True):
        self.closed = complete

    def flush_units(self) -> List[List[tuple]]:
        """Stores grouped by the flush that ended them (stores after the last flush are dropped)."""
        units, current = [], []
        for event in self.events:
            if event[0] == "store":
                current.append(event[1:])
            elif event[0] == "flush":
                units.append(current)
                current = []
        return units

    def stored(self, kind: str) -> list:
        return [entity for k, entity in self.entities if k == kind]

    def flush_count(self) -> int:
        return sum(1 for event in self.events if event[0] == "flush")
