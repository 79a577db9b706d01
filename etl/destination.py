# WORKFLOW: Contract every dump destination implements.
# Used by: Pipeline (store/flush calls), import script (lifecycle), db/destination.py
# Operations:
# 1. write_seed_data() - Write the five lookup enumerations before any dump data
# 2. store_<kind>() - Buffer one entity; may write a batch at a backend-chosen threshold
# 3. flush() - Write everything buffered, in FLUSH_ORDER
# 4. close() - Write what is left (after a successful run) and release resources
#
# Destinations must keep the submission order of entities of the same kind and must
# write kinds in FLUSH_ORDER, so rows referenced within one flush land first.

"""
Contract every dump destination implements.
"""

from abc import ABC, abstractmethod

from etl.entities import Badge, Comment, DumpEntity, Post, PostHistory, PostLink, Tag, User, Vote

FLUSH_ORDER = ("User", "Badge", "Post", "PostHistory", "Comment", "PostLink", "Tag", "Vote")

STORE_METHODS = {
    "User": "store_user",
    "Badge": "store_badge",
    "Post": "store_post",
    "PostHistory": "store_post_history",
    "Comment": "store_comment",
    "PostLink": "store_post_link",
    "Tag": "store_tag",
    "Vote": "store_vote",
}


class DumpDestination(ABC):
    """A pluggable place the dump is loaded into."""

    @abstractmethod
    def write_seed_data(self) -> None:
        """Idempotently write the lookup tables."""

    @abstractmethod
    def store_user(self, user: User) -> None: ...

    @abstractmethod
    def store_badge(self, badge: Badge) -> None: ...

    @abstractmethod
    def store_post(self, post: Post) -> None: ...

    @abstractmethod
    def store_post_history(self, post_history: PostHistory) -> None: ...

    @abstractmethod
    def store_comment(self, comment: Comment) -> None: ...

    @abstractmethod
    def store_post_link(self, post_link: PostLink) -> None: ...

    @abstractmethod
    def store_tag(self, tag: Tag) -> None: ...

    @abstractmethod
    def store_vote(self, vote: Vote) -> None: ...

    @abstractmethod
    def flush(self) -> None:
        """Durably write every buffered entity, kinds in FLUSH_ORDER."""

    def close(self, complete: bool = True) -> None:
        """
        Release resources.

        Args:
            complete: True after a successful run; backends may write what is still
                buffered and finish deferred DDL. False after a failure, leaving the
                target as of the last flush.
        """

    def store(self, kind: str, entity: DumpEntity) -> None:
        getattr(self, STORE_METHODS[kind])(entity)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close(complete=exc_type is None)
