import pytest

from dizkaz.user_tabs import UserListType, check_user_tab_auth_required


@pytest.mark.parametrize("tab", ["saved", "subscribed", "activity", "vote_up"])
def test_private_tabs_need_auth(tab):
    assert check_user_tab_auth_required(tab) is True


@pytest.mark.parametrize("tab", ["all", "article", "reply"])
def test_public_tabs_do_not_need_auth(tab):
    assert check_user_tab_auth_required(tab) is False


def test_unknown_tab_does_not_need_auth():
    assert check_user_tab_auth_required("bogus") is False


def test_enum_member_accepted():
    assert check_user_tab_auth_required(UserListType.VOTE_UP) is True
    assert check_user_tab_auth_required(UserListType.ALL) is False


def test_lookup_by_value():
    assert UserListType("vote_up") is UserListType.VOTE_UP
    assert UserListType("reply") is UserListType.REPLY