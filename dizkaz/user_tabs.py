"""Tabs of a user's profile page and which of them need a login."""

from __future__ import annotations

from enum import Enum

__all__ = ["UserListType", "check_user_tab_auth_required"]


class UserListType(str, Enum):
    """Lists shown on a user's profile."""

    ALL = "all"
    SAVED = "saved"
    ARTICLE = "article"
    REPLY = "reply"
    ACTIVITY = "activity"
    SUBSCRIBED = "subscribed"
    VOTE_UP = "vote_up"


_AUTH_REQUIRED = frozenset(
    {
        UserListType.SAVED,
        UserListType.SUBSCRIBED,
        UserListType.ACTIVITY,
        UserListType.VOTE_UP,
    }
)


def check_user_tab_auth_required(tab: UserListType | str) -> bool:
    """Whether showing ``tab`` requires a logged-in user."""
    try:
        return UserListType(tab) in _AUTH_REQUIRED
    except ValueError:
        return False