"""
Unit tests for the access policy.
"""

from datetime import datetime

import pytest

from expense_tracker_mcp.core.authorization import (
    can_view_user_data,
    require_access,
    require_self_or_admin,
    visible_user_ids,
)
from expense_tracker_mcp.core.exceptions import AccessDeniedError
from expense_tracker_mcp.models.request import AccountantUserRelationship
from expense_tracker_mcp.models.user import Role, User

ALICE = User(user_id=1, username="alice", role=Role.USER)
BOB = User(user_id=2, username="bob", role=Role.USER)
CAROL = User(user_id=3, username="carol", role=Role.ACCOUNTANT)
DAVE = User(user_id=4, username="dave", role=Role.ADMIN)
ERIN = User(user_id=5, username="erin", role=Role.ACCOUNTANT)

RELATIONSHIPS = [
    AccountantUserRelationship(accountant_id=3, user_id=1, created_at=datetime(2024, 1, 1)),
]


@pytest.mark.parametrize(
    "viewer, owner_id, allowed",
    [
        (ALICE, 1, True),
        (ALICE, 2, False),
        (CAROL, 1, True),
        (CAROL, 2, False),
        (CAROL, 3, True),
        (ERIN, 1, False),
        (DAVE, 1, True),
        (DAVE, 2, True),
    ],
)
def test_can_view_user_data(viewer: User, owner_id: int, allowed: bool) -> None:
    assert can_view_user_data(viewer, owner_id, RELATIONSHIPS) is allowed


def test_require_access_raises() -> None:
    with pytest.raises(AccessDeniedError, match="no access"):
        require_access(BOB, 1, RELATIONSHIPS)


def test_require_access_allows() -> None:
    require_access(CAROL, 1, RELATIONSHIPS)


def test_visible_user_ids() -> None:
    users = [ALICE, BOB, CAROL, DAVE, ERIN]
    assert visible_user_ids(DAVE, users, RELATIONSHIPS) == [1, 2]
    assert visible_user_ids(CAROL, users, RELATIONSHIPS) == [1]
    assert visible_user_ids(ERIN, users, RELATIONSHIPS) == []
    assert visible_user_ids(BOB, users, RELATIONSHIPS) == [2]


@pytest.mark.parametrize("viewer", [ALICE, DAVE])
def test_require_self_or_admin_allows(viewer: User) -> None:
    require_self_or_admin(viewer, 1)


@pytest.mark.parametrize("viewer", [BOB, CAROL, ERIN])
def test_require_self_or_admin_denies_others(viewer: User) -> None:
    # carol is alice's accountant, which does not extend to her requests
    with pytest.raises(AccessDeniedError, match="requests of user 1"):
        require_self_or_admin(viewer, 1)
