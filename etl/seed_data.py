# WORKFLOW: Fixed lookup enumerations written before any dump data.
# Used by: Destinations (write_seed_data)
# Tables:
# 1. BADGE_CLASSES - Gold/Silver/Bronze
# 2. POST_TYPES - includes -1 "Unknown" for placeholder posts of unknown type
# 3. POST_HISTORY_TYPES
# 4. LINK_TYPES
# 5. VOTE_TYPES
#
# Based on the public data dump schema documentation:
# https://meta.stackexchange.com/questions/2677/database-schema-documentation-for-the-public-data-dump-and-sede

from etl.entities import BadgeClass, LinkType, PostHistoryType, PostType, VoteType

# Post type codes used when synthesizing placeholder posts
POST_TYPE_UNKNOWN = -1
POST_TYPE_ANSWER = 2
POST_TYPE_TAG_WIKI_EXCERPT = 4
POST_TYPE_TAG_WIKI = 5

BADGE_CLASSES = [
    BadgeClass(id=1, name="Gold"),
    BadgeClass(id=2, name="Silver"),
    BadgeClass(id=3, name="Bronze"),
]

POST_TYPES = [
    PostType(id=POST_TYPE_UNKNOWN, name="Unknown"),
    PostType(id=1, name="Question"),
    PostType(id=POST_TYPE_ANSWER, name="Answer"),
    PostType(id=3, name="Orphaned tag wiki"),
    PostType(id=POST_TYPE_TAG_WIKI_EXCERPT, name="Tag wiki excerpt"),
    PostType(id=POST_TYPE_TAG_WIKI, name="Tag wiki"),
    PostType(id=6, name="Moderator nomination"),
    PostType(id=7, name="Wiki placeholder"),
    PostType(id=8, name="Privilege wiki"),
]

POST_HISTORY_TYPES = [
    PostHistoryType(id=1, name="Initial Title - initial title (questions only)"),
    PostHistoryType(id=2, name="Initial Body - initial post raw body text"),
    PostHistoryType(id=3, name="Initial Tags - initial list of tags (questions only)"),
    PostHistoryType(id=4, name="Edit Title - modified title (questions only)"),
    PostHistoryType(id=5, name="Edit Body - modified post body (raw markdown)"),
    PostHistoryType(id=6, name="Edit Tags - modified list of tags (questions only)"),
    PostHistoryType(id=7, name="Rollback Title - reverted title (questions only)"),
    PostHistoryType(id=8, name="Rollback Body - reverted body (raw markdown)"),
    PostHistoryType(id=9, name="Rollback Tags - reverted list of tags (questions only)"),
    PostHistoryType(id=10, name="Post Closed - post voted to be closed"),
    PostHistoryType(id=11, name="Post Reopened - post voted to be reopened"),
    PostHistoryType(id=12, name="Post Deleted - post voted to be removed"),
    PostHistoryType(id=13, name="Post Undeleted - post voted to be restored"),
    PostHistoryType(id=14, name="Post Locked - post locked by moderator"),
    PostHistoryType(id=15, name="Post Unlocked - post unlocked by moderator"),
    PostHistoryType(id=16, name="Community Owned - post now community owned"),
    PostHistoryType(id=17, name="Post Migrated - post migrated - now replaced by 35/36 (away/here)"),
    PostHistoryType(id=18, name="Question Merged - question merged with deleted question"),
    PostHistoryType(id=19, name="Question Protected - question was protected by a moderator."),
    PostHistoryType(id=20, name="Question Unprotected - question was unprotected by a moderator."),
    PostHistoryType(id=21, name="Post Disassociated - OwnerUserId removed from post by admin"),
    PostHistoryType(id=22, name="Question Unmerged - answers/votes restored to previously merged question"),
    PostHistoryType(id=23, name="Unknown dev related event"),
    PostHistoryType(id=24, name="Suggested Edit Applied"),
    PostHistoryType(id=25, name="Post Tweeted"),
    PostHistoryType(id=26, name="Vote nullification by dev (ERM?)"),
    PostHistoryType(id=27, name="Post unmigrated/hidden moderator migration?"),
    PostHistoryType(id=28, name="Unknown suggestion event"),
    PostHistoryType(id=29, name="Unknown moderator event (possibly de-wikification?)"),
    PostHistoryType(id=30, name="Unknown event (too rare to guess)"),
    PostHistoryType(id=31, name="Comment discussion moved to chat"),
    PostHistoryType(id=33, name="Post notice added - comment contains foreign key to PostNotices"),
    PostHistoryType(id=34, name="Post notice removed - comment contains foreign key to PostNotices"),
    PostHistoryType(id=35, name="Post migrated away - replaces id 17"),
    PostHistoryType(id=36, name="Post migrated here - replaces id 17"),
    PostHistoryType(id=37, name="Post merge source"),
    PostHistoryType(id=38, name="Post merge destination"),
    PostHistoryType(id=50, name="Bumped by Community User"),
    PostHistoryType(id=52, name="Question became hot network question (main) / Hot Meta question (meta)"),
    PostHistoryType(id=53, name="Question removed from hot network/meta questions by a moderator"),
    PostHistoryType(id=66, name="Created from Ask Wizard"),
]

LINK_TYPES = [
    LinkType(id=1, name="Linked"),
    LinkType(id=3, name="Duplicate"),
]

VOTE_TYPES = [
    VoteType(id=1, name="AcceptedByOriginator"),
    VoteType(id=2, name="UpMod"),
    VoteType(id=3, name="DownMod"),
    VoteType(id=4, name="Offensive"),
    VoteType(id=5, name="Bookmark"),
    VoteType(id=6, name="Close"),
    VoteType(id=7, name="Reopen"),
    VoteType(id=8, name="BountyStart"),
    VoteType(id=9, name="BountyClose"),
    VoteType(id=10, name="Deletion"),
    VoteType(id=11, name="Undeletion"),
    VoteType(id=12, name="Spam"),
    VoteType(id=13, name="Unknown"),
    VoteType(id=14, name="NominateModerator"),
    VoteType(id=15, name="ModeratorReview"),
    VoteType(id=16, name="ApproveEditSuggestion"),
    VoteType(id=17, name="Reaction1"),
    VoteType(id=18, name="Helpful"),
    VoteType(id=19, name="ThankYou"),
    VoteType(id=20, name="WellWritten"),
    VoteType(id=21, name="Follow"),
    VoteType(id=22, name="Reaction2"),
    VoteType(id=23, name="Reaction3"),
    VoteType(id=24, name="Reaction4"),
    VoteType(id=25, name="Reaction5"),
    VoteType(id=26, name="Reaction6"),
    VoteType(id=27, name="Reaction7"),
    VoteType(id=28, name="Reaction8"),
    VoteType(id=29, name="Outdated"),
    VoteType(id=30, name="NotOutdated"),
    VoteType(id=31, name="PreVote"),
    VoteType(id=32, name="CollectiveDiscussionUpvote"),
    VoteType(id=33, name="CollectiveDiscussionDownvote"),
]

# Lookup kind -> rows, in the order destinations write them
SEED_DATA = {
    "BadgeClass": BADGE_CLASSES,
    "PostHistoryType": POST_HISTORY_TYPES,
    "LinkType": LINK_TYPES,
    "PostType": POST_TYPES,
    "VoteType": VOTE_TYPES,
}
