# WORKFLOW: Referential repair pipeline - reads every dump table into a destination.
# Used by: scripts/import_dump.py, tests
# Stages (fixed order): Users -> Badges -> Posts -> PostHistory -> Comments -> PostLinks -> Tags -> Votes
#
# Per stage:
# 1. Stream-decode the table
# 2. Check each foreign key against the running User/Post id sets; synthesize a placeholder
#    for every missing id (once per stage) and defer records that needed a new placeholder
# 3. Replay deferred records in encounter order, then flush the destination once
# 4. Merge the stage's placeholder ids into the running sets
#
# Posts are preceded by an id-only pass so accepted answers and parents may point forward.
# Accepted-answer/parent placeholders are stored inline (same kind, written first);
# owner/editor user placeholders defer the post. Comments are forwarded unchecked.

"""
Referential repair pipeline for the dump import.
"""

import logging
from contextlib import closing
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Set

import structlog

from etl.archive import collect_ids, locate
from etl.destination import DumpDestination
from etl.entities import Badge, DumpEntity, Post, PostHistory, PostLink, Tag, User, Vote
from etl.errors import DumpDecodeError
from etl.placeholders import placeholder_post, placeholder_user
from etl.schemas import get_table
from etl.seed_data import (
    POST_TYPE_ANSWER, POST_TYPE_TAG_WIKI, POST_TYPE_TAG_WIKI_EXCERPT, POST_TYPE_UNKNOWN
)
from etl.xml_reader import decode_rows

logger = logging.getLogger(__name__)
events = structlog.get_logger("etl.pipeline")


@dataclass
class ImportState:
    """Identifiers the destination already holds, real or placeholder."""
    known_user_ids: Set[int] = field(default_factory=set)
    known_post_ids: Set[int] = field(default_factory=set)


@dataclass
class StageReport:
    table: str
    found: bool = False
    read: int = 0
    forwarded: int = 0
    deferred: int = 0
    placeholder_users: int = 0
    placeholder_posts: int = 0


@dataclass
class _Stage:
    kind: str
    report: StageReport
    added_user_ids: Set[int] = field(default_factory=set)
    added_post_ids: Set[int] = field(default_factory=set)
    deferred: List[DumpEntity] = field(default_factory=list)


# Returns True when the record must be deferred until after the table is read.
Check = Callable[[DumpEntity, _Stage], bool]


class DumpReader:
    """
    Reads one site's dump from its archives into a destination.

    Args:
        destination: Where entities are stored
        file_names: Archive paths; the first archive holding a table wins
        state: Known ids to start from (defaults to empty sets)
    """

    def __init__(self, destination: DumpDestination, file_names: Sequence[str],
                 state: Optional[ImportState] = None):
        self.destination = destination
        self.file_names = list(file_names)
        self.state = state if state is not None else ImportState()

    def read_dump(self) -> List[StageReport]:
        """Run all eight stages in order."""
        return [
            self.read_users(),
            self.read_badges(),
            self.read_posts(),
            self.read_post_history(),
            self.read_comments(),
            self.read_post_links(),
            self.read_tags(),
            self.read_votes(),
        ]

    # Stages

    def read_users(self) -> StageReport:
        def check(user: User, stage: _Stage) -> bool:
            self.state.known_user_ids.add(user.id)
            return False

        return self._run_stage("User", check)

    def read_badges(self) -> StageReport:
        def check(badge: Badge, stage: _Stage) -> bool:
            return self._require_user(stage, badge.user_id)

        return self._run_stage("Badge", check)

    def read_posts(self) -> StageReport:
        # Posts may point at later (or deleted) posts, so every id in the table is needed up front.
        self.state.known_post_ids |= collect_ids(self.file_names, get_table("Post").file_name)

        def check(post: Post, stage: _Stage) -> bool:
            # Placeholder posts go into the same buffer ahead of this post; no deferral needed.
            self._require_post(stage, post.accepted_answer_id, POST_TYPE_ANSWER)
            self._require_post(stage, post.parent_id, POST_TYPE_UNKNOWN)

            defer = self._require_user(stage, post.owner_user_id)
            defer = self._require_user(stage, post.last_editor_user_id) or defer
            return defer

        return self._run_stage("Post", check)

    def read_post_history(self) -> StageReport:
        def check(post_history: PostHistory, stage: _Stage) -> bool:
            defer = self._require_post(stage, post_history.post_id, POST_TYPE_UNKNOWN)
            defer = self._require_user(stage, post_history.user_id) or defer
            return defer

        return self._run_stage("PostHistory", check)

    def read_comments(self) -> StageReport:
        return self._run_stage("Comment", lambda comment, stage: False)

    def read_post_links(self) -> StageReport:
        def check(post_link: PostLink, stage: _Stage) -> bool:
            return self._require_post(stage, post_link.related_post_id, POST_TYPE_UNKNOWN)

        return self._run_stage("PostLink", check)

    def read_tags(self) -> StageReport:
        def check(tag: Tag, stage: _Stage) -> bool:
            defer = self._require_post(stage, tag.excerpt_post_id, POST_TYPE_TAG_WIKI_EXCERPT)
            defer = self._require_post(stage, tag.wiki_post_id, POST_TYPE_TAG_WIKI) or defer
            return defer

        return self._run_stage("Tag", check)

    def read_votes(self) -> StageReport:
        def check(vote: Vote, stage: _Stage) -> bool:
            return self._require_post(stage, vote.post_id, POST_TYPE_UNKNOWN)

        return self._run_stage("Vote", check)

    # Shared machinery

    def _run_stage(self, kind: str, check: Check) -> StageReport:
        table = get_table(kind)
        stage = _Stage(kind=kind, report=StageReport(table=table.file_name))
        report = stage.report
        events.info("stage_started", table=table.file_name)

        with closing(self._read_table(kind, report)) as entities:
            for entity in entities:
                report.read += 1
                if check(entity, stage):
                    stage.deferred.append(entity)
                else:
                    self.destination.store(kind, entity)
                    report.forwarded += 1

        for entity in stage.deferred:
            self.destination.store(kind, entity)
        report.deferred = len(stage.deferred)

        self.destination.flush()

        self.state.known_user_ids |= stage.added_user_ids
        self.state.known_post_ids |= stage.added_post_ids

        events.info(
            "stage_finished",
            table=report.table,
            found=report.found,
            read=report.read,
            forwarded=report.forwarded,
            deferred=report.deferred,
            placeholder_users=report.placeholder_users,
            placeholder_posts=report.placeholder_posts,
        )
        return report

    def _read_table(self, kind: str, report: StageReport) -> Iterator[DumpEntity]:
        """Yield the entities of one table; nothing when no archive contains it."""
        table = get_table(kind)
        with locate(self.file_names, table.file_name) as stream:
            if stream is None:
                logger.info(f"{table.file_name} not found in any archive, skipping")
                return

            report.found = True
            logger.info(f"Reading {table.file_name}...")
            try:
                for fields in decode_rows(stream, table.fields, table.file_name):
                    yield table.entity(**fields)
            except DumpDecodeError:
                logger.error(f"Failed to read {table.file_name}")
                raise

    def _require_user(self, stage: _Stage, user_id: Optional[int]) -> bool:
        """
        Make sure ``user_id`` will resolve, adding a placeholder User if needed.

        Returns:
            True if the id was not already known before this stage
        """
        if user_id is None or user_id in self.state.known_user_ids:
            return False
        if user_id not in stage.added_user_ids:
            stage.added_user_ids.add(user_id)
            logger.debug(f"Adding placeholder user {user_id} for {stage.kind}")
            self.destination.store_user(placeholder_user(user_id))
            stage.report.placeholder_users += 1
        return True

    def _require_post(self, stage: _Stage, post_id: Optional[int], post_type_id: int) -> bool:
        """
        Make sure ``post_id`` will resolve, adding a placeholder Post if needed.

        Returns:
            True if the id was not already known before this stage
        """
        if post_id is None or post_id in self.state.known_post_ids:
            return False
        if post_id not in stage.added_post_ids:
            stage.added_post_ids.add(post_id)
            logger.debug(f"Adding placeholder post {post_id} (type {post_type_id}) for {stage.kind}")
            self.destination.store_post(placeholder_post(post_id, post_type_id))
            stage.report.placeholder_posts += 1
        return True


def run_import(file_names: Sequence[str], destination: DumpDestination,
               state: Optional[ImportState] = None) -> List[StageReport]:
    """
    Load a whole dump: seed data, all eight stages, then close the destination.

    The destination is closed as incomplete if any stage fails.

    Args:
        file_names: Archive paths in priority order
        destination: Where entities are stored
        state: Known ids to start from

    Returns:
        One StageReport per stage
    """
    with destination:
        destination.write_seed_data()
        reports = DumpReader(destination, file_names, state).read_dump()

    events.info(
        "import_finished",
        tables=sum(1 for r in reports if r.found),
        rows=sum(r.read for r in reports),
        placeholder_users=sum(r.placeholder_users for r in reports),
        placeholder_posts=sum(r.placeholder_posts for r in reports),
    )
    return reports
