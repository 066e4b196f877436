"""API endpoints.

Each API area has its own enumeration. Member names are the endpoint path
with ``/`` replaced by ``_``; member values are URI templates relative to the
instance base URI. Placeholders like ``<ID>`` are replaced by the parameter of
the same (lower-case) name, see :func:`masto_tools.client.params.apply`.

Usage:
    from masto_tools.client.endpoints import V1, resolve

    resolve(V1.ACCOUNTS_ID_FOLLOW)  # "/api/v1/accounts/<ID>/follow"
"""

from enum import Enum, unique
from typing import Union


class _Endpoint(str, Enum):
    """Base for endpoint enumerations."""

    @property
    def template(self) -> str:
        return self.value


@unique
class V1(_Endpoint):
    """Mastodon API v1."""

    APPS = "/api/v1/apps"
    APPS_VERIFY_CREDENTIALS = "/api/v1/apps/verify_credentials"

    ACCOUNTS = "/api/v1/accounts"
    ACCOUNTS_VERIFY_CREDENTIALS = "/api/v1/accounts/verify_credentials"
    ACCOUNTS_UPDATE_CREDENTIALS = "/api/v1/accounts/update_credentials"
    ACCOUNTS_ID = "/api/v1/accounts/<ID>"
    ACCOUNTS_ID_STATUSES = "/api/v1/accounts/<ID>/statuses"
    ACCOUNTS_ID_FOLLOWERS = "/api/v1/accounts/<ID>/followers"
    ACCOUNTS_ID_FOLLOWING = "/api/v1/accounts/<ID>/following"
    ACCOUNTS_ID_FEATURED_TAGS = "/api/v1/accounts/<ID>/featured_tags"
    ACCOUNTS_ID_LISTS = "/api/v1/accounts/<ID>/lists"
    ACCOUNTS_ID_IDENTITY_PROOFS = "/api/v1/accounts/<ID>/identity_proofs"
    ACCOUNTS_ID_FOLLOW = "/api/v1/accounts/<ID>/follow"
    ACCOUNTS_ID_UNFOLLOW = "/api/v1/accounts/<ID>/unfollow"
    ACCOUNTS_ID_BLOCK = "/api/v1/accounts/<ID>/block"
    ACCOUNTS_ID_UNBLOCK = "/api/v1/accounts/<ID>/unblock"
    ACCOUNTS_ID_MUTE = "/api/v1/accounts/<ID>/mute"
    ACCOUNTS_ID_UNMUTE = "/api/v1/accounts/<ID>/unmute"
    ACCOUNTS_ID_PIN = "/api/v1/accounts/<ID>/pin"
    ACCOUNTS_ID_UNPIN = "/api/v1/accounts/<ID>/unpin"
    ACCOUNTS_ID_NOTE = "/api/v1/accounts/<ID>/note"
    ACCOUNTS_RELATIONSHIPS = "/api/v1/accounts/relationships"
    ACCOUNTS_SEARCH = "/api/v1/accounts/search"
    ACCOUNTS_LOOKUP = "/api/v1/accounts/lookup"

    BOOKMARKS = "/api/v1/bookmarks"
    FAVOURITES = "/api/v1/favourites"
    MUTES = "/api/v1/mutes"
    BLOCKS = "/api/v1/blocks"
    DOMAIN_BLOCKS = "/api/v1/domain_blocks"
    FILTERS = "/api/v1/filters"
    FILTERS_ID = "/api/v1/filters/<ID>"
    REPORTS = "/api/v1/reports"
    FOLLOW_REQUESTS = "/api/v1/follow_requests"
    FOLLOW_REQUESTS_ID_AUTHORIZE = "/api/v1/follow_requests/<ID>/authorize"
    FOLLOW_REQUESTS_ID_REJECT = "/api/v1/follow_requests/<ID>/reject"
    ENDORSEMENTS = "/api/v1/endorsements"
    FEATURED_TAGS = "/api/v1/featured_tags"
    FEATURED_TAGS_ID = "/api/v1/featured_tags/<ID>"
    FEATURED_TAGS_SUGGESTIONS = "/api/v1/featured_tags/suggestions"
    PREFERENCES = "/api/v1/preferences"
    SUGGESTIONS = "/api/v1/suggestions"
    SUGGESTIONS_ACCOUNT_ID = "/api/v1/suggestions/<ACCOUNT_ID>"

    STATUSES = "/api/v1/statuses"
    STATUSES_ID = "/api/v1/statuses/<ID>"
    STATUSES_ID_CONTEXT = "/api/v1/statuses/<ID>/context"
    STATUSES_ID_REBLOGGED_BY = "/api/v1/statuses/<ID>/reblogged_by"
    STATUSES_ID_FAVOURITED_BY = "/api/v1/statuses/<ID>/favourited_by"
    STATUSES_ID_FAVOURITE = "/api/v1/statuses/<ID>/favourite"
    STATUSES_ID_UNFAVOURITE = "/api/v1/statuses/<ID>/unfavourite"
    STATUSES_ID_REBLOG = "/api/v1/statuses/<ID>/reblog"
    STATUSES_ID_UNREBLOG = "/api/v1/statuses/<ID>/unreblog"
    STATUSES_ID_BOOKMARK = "/api/v1/statuses/<ID>/bookmark"
    STATUSES_ID_UNBOOKMARK = "/api/v1/statuses/<ID>/unbookmark"
    STATUSES_ID_MUTE = "/api/v1/statuses/<ID>/mute"
    STATUSES_ID_UNMUTE = "/api/v1/statuses/<ID>/unmute"
    STATUSES_ID_PIN = "/api/v1/statuses/<ID>/pin"
    STATUSES_ID_UNPIN = "/api/v1/statuses/<ID>/unpin"
    STATUSES_ID_HISTORY = "/api/v1/statuses/<ID>/history"
    STATUSES_ID_SOURCE = "/api/v1/statuses/<ID>/source"

    MEDIA = "/api/v1/media"
    MEDIA_ID = "/api/v1/media/<ID>"
    POLLS_ID = "/api/v1/polls/<ID>"
    POLLS_ID_VOTES = "/api/v1/polls/<ID>/votes"
    SCHEDULED_STATUSES = "/api/v1/scheduled_statuses"
    SCHEDULED_STATUSES_ID = "/api/v1/scheduled_statuses/<ID>"

    TIMELINES_PUBLIC = "/api/v1/timelines/public"
    TIMELINES_TAG_HASHTAG = "/api/v1/timelines/tag/<HASHTAG>"
    TIMELINES_HOME = "/api/v1/timelines/home"
    TIMELINES_LIST_LIST_ID = "/api/v1/timelines/list/<LIST_ID>"
    CONVERSATIONS = "/api/v1/conversations"
    CONVERSATIONS_ID = "/api/v1/conversations/<ID>"
    CONVERSATIONS_ID_READ = "/api/v1/conversations/<ID>/read"
    LISTS = "/api/v1/lists"
    LISTS_ID = "/api/v1/lists/<ID>"
    LISTS_ID_ACCOUNTS = "/api/v1/lists/<ID>/accounts"
    MARKERS = "/api/v1/markers"

    STREAMING_HEALTH = "/api/v1/streaming/health"
    STREAMING_USER = "/api/v1/streaming/user"
    STREAMING_USER_NOTIFICATION = "/api/v1/streaming/user/notification"
    STREAMING_PUBLIC = "/api/v1/streaming/public"
    STREAMING_PUBLIC_LOCAL = "/api/v1/streaming/public/local"
    STREAMING_PUBLIC_REMOTE = "/api/v1/streaming/public/remote"
    STREAMING_HASHTAG = "/api/v1/streaming/hashtag"
    STREAMING_HASHTAG_LOCAL = "/api/v1/streaming/hashtag/local"
    STREAMING_LIST = "/api/v1/streaming/list"
    STREAMING_DIRECT = "/api/v1/streaming/direct"

    NOTIFICATIONS = "/api/v1/notifications"
    NOTIFICATIONS_ID = "/api/v1/notifications/<ID>"
    NOTIFICATIONS_CLEAR = "/api/v1/notifications/clear"
    NOTIFICATIONS_ID_DISMISS = "/api/v1/notifications/<ID>/dismiss"
    PUSH_SUBSCRIPTION = "/api/v1/push/subscription"

    INSTANCE = "/api/v1/instance"
    INSTANCE_PEERS = "/api/v1/instance/peers"
    INSTANCE_ACTIVITY = "/api/v1/instance/activity"
    INSTANCE_RULES = "/api/v1/instance/rules"
    TRENDS = "/api/v1/trends"
    TRENDS_STATUSES = "/api/v1/trends/statuses"
    TRENDS_LINKS = "/api/v1/trends/links"
    DIRECTORY = "/api/v1/directory"
    CUSTOM_EMOJIS = "/api/v1/custom_emojis"
    ANNOUNCEMENTS = "/api/v1/announcements"
    ANNOUNCEMENTS_ID_DISMISS = "/api/v1/announcements/<ID>/dismiss"
    ANNOUNCEMENTS_ID_REACTIONS_NAME = "/api/v1/announcements/<ID>/reactions/<NAME>"
    PROOFS = "/api/proofs"
    OEMBED = "/api/oembed"


@unique
class V2(_Endpoint):
    """Mastodon API v2."""

    SEARCH = "/api/v2/search"
    MEDIA = "/api/v2/media"
    INSTANCE = "/api/v2/instance"
    FILTERS = "/api/v2/filters"
    FILTERS_ID = "/api/v2/filters/<ID>"
    FILTERS_ID_KEYWORDS = "/api/v2/filters/<ID>/keywords"
    SUGGESTIONS = "/api/v2/suggestions"


@unique
class OAuth(_Endpoint):
    """OAuth endpoints."""

    AUTHORIZE = "/oauth/authorize"
    TOKEN = "/oauth/token"
    REVOKE = "/oauth/revoke"


@unique
class Admin(_Endpoint):
    """Mastodon moderation API."""

    ACCOUNTS = "/api/v1/admin/accounts"
    ACCOUNTS_ID = "/api/v1/admin/accounts/<ID>"
    ACCOUNTS_ACCOUNT_ID_ACTION = "/api/v1/admin/accounts/<ACCOUNT_ID>/action"
    ACCOUNTS_ID_APPROVE = "/api/v1/admin/accounts/<ID>/approve"
    ACCOUNTS_ID_REJECT = "/api/v1/admin/accounts/<ID>/reject"
    ACCOUNTS_ID_ENABLE = "/api/v1/admin/accounts/<ID>/enable"
    ACCOUNTS_ID_UNSILENCE = "/api/v1/admin/accounts/<ID>/unsilence"
    ACCOUNTS_ID_UNSUSPEND = "/api/v1/admin/accounts/<ID>/unsuspend"
    REPORTS = "/api/v1/admin/reports"
    REPORTS_ID = "/api/v1/admin/reports/<ID>"
    REPORTS_ID_ASSIGN_TO_SELF = "/api/v1/admin/reports/<ID>/assign_to_self"
    REPORTS_ID_UNASSIGN = "/api/v1/admin/reports/<ID>/unassign"
    REPORTS_ID_RESOLVE = "/api/v1/admin/reports/<ID>/resolve"
    REPORTS_ID_REOPEN = "/api/v1/admin/reports/<ID>/reopen"


@unique
class Pleroma(_Endpoint):
    """Pleroma/Akkoma extensions."""

    ADMIN_USERS = "/api/pleroma/admin/users"
    ADMIN_USERS_FOLLOW = "/api/pleroma/admin/users/follow"
    ADMIN_USERS_UNFOLLOW = "/api/pleroma/admin/users/unfollow"
    ADMIN_USERS_NICKNAME = "/api/pleroma/admin/users/<NICKNAME>"
    ADMIN_USERS_NICKNAME_OR_ID = "/api/pleroma/admin/users/<NICKNAME_OR_ID>"
    ADMIN_USERS_NICKNAME_PERMISSION_GROUP = (
        "/api/pleroma/admin/users/<NICKNAME>/permission_group"
    )
    ADMIN_USERS_PERMISSION_GROUP_PERMISSION_GROUP = (
        "/api/pleroma/admin/users/permission_group/<PERMISSION_GROUP>"
    )
    ADMIN_USERS_NICKNAME_OR_ID_STATUSES = (
        "/api/pleroma/admin/users/<NICKNAME_OR_ID>/statuses"
    )
    ADMIN_INSTANCES_INSTANCE_STATUSES = (
        "/api/pleroma/admin/instances/<INSTANCE>/statuses"
    )
    ADMIN_REPORTS = "/api/pleroma/admin/reports"
    ADMIN_REPORTS_REPORT_ID_NOTES = "/api/pleroma/admin/reports/<REPORT_ID>/notes"
    ADMIN_STATUSES = "/api/pleroma/admin/statuses"
    ADMIN_STATUSES_ID = "/api/pleroma/admin/statuses/<ID>"
    ADMIN_CONFIG = "/api/pleroma/admin/config"
    EMOJI_PACKS = "/api/pleroma/emoji/packs"
    EMOJI_PACKS_NAME = "/api/pleroma/emoji/packs/<NAME>"
    ACCOUNTS_ID_FAVOURITES = "/api/v1/pleroma/accounts/<ID>/favourites"
    ACCOUNTS_ID_SUBSCRIBE = "/api/v1/pleroma/accounts/<ID>/subscribe"
    ACCOUNTS_ID_UNSUBSCRIBE = "/api/v1/pleroma/accounts/<ID>/unsubscribe"
    STATUSES_ID_REACTIONS = "/api/v1/pleroma/statuses/<ID>/reactions"
    STATUSES_ID_REACTIONS_EMOJI = "/api/v1/pleroma/statuses/<ID>/reactions/<EMOJI>"
    NOTIFICATIONS_READ = "/api/v1/pleroma/notifications/read"
    CHATS = "/api/v1/pleroma/chats"
    CHATS_ID_MESSAGES = "/api/v1/pleroma/chats/<ID>/messages"


Endpoint = Union[V1, V2, OAuth, Admin, Pleroma]

AREAS: tuple[type[_Endpoint], ...] = (V1, V2, OAuth, Admin, Pleroma)


def resolve(endpoint: Endpoint) -> str:
    """Return the URI template of an endpoint.

    Raises:
        TypeError: If *endpoint* is not a member of one of the endpoint enums.
    """
    if not isinstance(endpoint, AREAS):
        raise TypeError(f"Not an API endpoint: {endpoint!r}")
    return endpoint.template
