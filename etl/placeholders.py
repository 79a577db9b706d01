# WORKFLOW: Placeholder rows for identifiers referenced but missing from the dump.
# Used by: Pipeline, whenever a foreign key names an unknown User or Post
# Functions:
# 1. placeholder_user() - Stand-in User for a deleted/absent user id
# 2. placeholder_post() - Stand-in Post of a given type for a deleted/absent post id
#
# Both are pure functions of the missing id (and post type); numeric fields get the -1 sentinel.

from datetime import datetime, timezone

from etl.entities import Post, User
from etl.seed_data import POST_TYPE_UNKNOWN

SENTINEL = -1
PLACEHOLDER_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)
PLACEHOLDER_LICENSE = "Unknown"


def placeholder_user(user_id: int) -> User:
    return User(
        id=user_id,
        display_name=f"[Missing User ID {user_id}]",
        reputation=SENTINEL,
        views=SENTINEL,
        up_votes=SENTINEL,
        down_votes=SENTINEL,
        account_id=SENTINEL,
        creation_date=PLACEHOLDER_DATE,
        last_access_date=PLACEHOLDER_DATE,
    )


def placeholder_post(post_id: int, post_type_id: int = POST_TYPE_UNKNOWN) -> Post:
    """
    Build a stand-in Post.

    Args:
        post_id: The missing post id
        post_type_id: Type code matching the reference that needed it
            (answer for accepted answers, tag wiki/excerpt for tags, unknown otherwise)
    """
    marker = f"[Missing Post ID {post_id}]"
    return Post(
        id=post_id,
        post_type_id=post_type_id,
        score=SENTINEL,
        content_license=PLACEHOLDER_LICENSE,
        title=marker,
        body=marker,
        creation_date=PLACEHOLDER_DATE,
        last_activity_date=PLACEHOLDER_DATE,
    )
