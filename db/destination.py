# WORKFLOW: SQL destination - buffers dump entities and bulk inserts them with SQLAlchemy.
# Used by: scripts/import_dump.py, tests
# Functions:
# 1. write_seed_data() - Insert the lookup rows that are not there yet
# 2. store_<kind>() - Buffer an entity; a full buffer writes itself and every buffer ahead of it
# 3. flush() - Write all buffers in FLUSH_ORDER
# 4. close() - Final flush, foreign key indexes, deferred posts -> posts constraints, dispose
#
# Loading flow: entity -> row dict -> per-kind buffer -> INSERT batch (one transaction) -> commit
# Errors from the database propagate; nothing is retried.

"""
SQL destination for the dump import.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import ForeignKeyConstraint, Index, insert, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.schema import AddConstraint

from core.config import settings
from db.models import LOOKUP_MODELS, MODELS, post_load_schema
from db.session import create_dump_engine, get_session_factory, init_db
from etl.destination import FLUSH_ORDER, DumpDestination
from etl.entities import Badge, Comment, DumpEntity, Post, PostHistory, PostLink, Tag, User, Vote
from etl.seed_data import SEED_DATA

logger = logging.getLogger(__name__)


class SqlDestination(DumpDestination):
    """
    Loads the dump into any database SQLAlchemy can reach.

    Args:
        database_url: SQLAlchemy URL; defaults to settings.database_url
        batch_size: Rows buffered per kind before a batch is written
        replace: Drop and recreate all tables before loading
        engine: Use this engine instead of creating one from database_url
    """

    def __init__(self, database_url: Optional[str] = None, batch_size: Optional[int] = None,
                 replace: Optional[bool] = None, engine: Optional[Engine] = None):
        self.batch_size = settings.batch_size if batch_size is None else batch_size
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

        self.engine = engine if engine is not None else create_dump_engine(database_url)
        self._session_factory = get_session_factory(self.engine)
        self._buffers: Dict[str, List[dict]] = {kind: [] for kind in FLUSH_ORDER}
        self._closed = False

        init_db(self.engine, replace=settings.replace if replace is None else replace)

    def write_seed_data(self) -> None:
        with self._session_factory() as session, session.begin():
            for kind, rows in SEED_DATA.items():
                model = LOOKUP_MODELS[kind]
                existing = set(session.scalars(select(model.id)))
                missing = [row.model_dump() for row in rows if row.id not in existing]
                if missing:
                    session.execute(insert(model), missing)
                logger.info(f"Seeded {len(missing)} {kind} rows ({len(existing)} already present)")

    def store_user(self, user: User) -> None:
        self._buffer("User", user)

    def store_badge(self, badge: Badge) -> None:
        self._buffer("Badge", badge)

    def store_post(self, post: Post) -> None:
        self._buffer("Post", post)

    def store_post_history(self, post_history: PostHistory) -> None:
        self._buffer("PostHistory", post_history)

    def store_comment(self, comment: Comment) -> None:
        self._buffer("Comment", comment)

    def store_post_link(self, post_link: PostLink) -> None:
        self._buffer("PostLink", post_link)

    def store_tag(self, tag: Tag) -> None:
        self._buffer("Tag", tag)

    def store_vote(self, vote: Vote) -> None:
        self._buffer("Vote", vote)

    def flush(self) -> None:
        for kind in FLUSH_ORDER:
            self._write_buffer(kind)

    def close(self, complete: bool = True) -> None:
        if self._closed:
            return
        self._closed = True

        try:
            if complete:
                self.flush()
                indexes, constraints = post_load_schema()
                self._create_foreign_key_indexes(indexes)
                self._add_deferred_foreign_keys(constraints)
            else:
                pending = sum(len(rows) for rows in self._buffers.values())
                if pending:
                    logger.warning(f"Discarding {pending} buffered rows after a failed import")
                for rows in self._buffers.values():
                    rows.clear()
        finally:
            self.engine.dispose()

    def pending(self, kind: str) -> int:
        """Number of buffered, unwritten rows of ``kind``."""
        return len(self._buffers[kind])

    def _buffer(self, kind: str, entity: DumpEntity) -> None:
        rows = self._buffers[kind]
        rows.append(entity.model_dump())
        if len(rows) >= self.batch_size:
            # Kinds ahead in flush order go first so the batch never precedes rows it references.
            for earlier in FLUSH_ORDER[:FLUSH_ORDER.index(kind) + 1]:
                self._write_buffer(earlier)

    def _write_buffer(self, kind: str) -> None:
        rows = self._buffers[kind]
        if not rows:
            return

        logger.info(f"Flushing {len(rows)} {kind} items...")
        with self._session_factory() as session, session.begin():
            session.execute(insert(MODELS[kind]), rows)
        rows.clear()

    def _create_foreign_key_indexes(self, indexes: List[Index]) -> None:
        logger.info("Adding foreign key indices...")
        with self.engine.begin() as conn:
            for index in indexes:
                index.create(conn, checkfirst=True)

    def _add_deferred_foreign_keys(self, constraints: List[ForeignKeyConstraint]) -> None:
        # SQLite cannot add a constraint to an existing table.
        if self.engine.dialect.name == "sqlite":
            logger.info("Skipping deferred foreign keys on sqlite")
            return

        inspector = inspect(self.engine)
        with self.engine.begin() as conn:
            for constraint in constraints:
                table = constraint.table.name
                existing = {tuple(fk["constrained_columns"]) for fk in inspector.get_foreign_keys(table)}
                if tuple(constraint.column_keys) in existing:
                    continue
                logger.info(f"Adding foreign key {constraint.name}")
                conn.execute(AddConstraint(constraint))
