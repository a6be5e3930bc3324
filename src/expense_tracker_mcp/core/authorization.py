"""
Role-based access policy for user-scoped data.

Checked by the tools layer before any statistics are computed; the statistics
engine itself only ever receives one user's items.
"""

from typing import Iterable, List

from expense_tracker_mcp.core.exceptions import AccessDeniedError
from expense_tracker_mcp.models.request import AccountantUserRelationship
from expense_tracker_mcp.models.user import Role, User


def can_view_user_data(
    viewer: User,
    owner_id: int,
    relationships: Iterable[AccountantUserRelationship],
) -> bool:
    """
    Decide whether viewer may read the finances of owner_id.

    Admins may read everyone's data, users only their own, and accountants
    their own plus that of users linked to them.
    """
    if viewer.role == Role.ADMIN or viewer.user_id == owner_id:
        return True
    if viewer.role == Role.ACCOUNTANT:
        return any(
            rel.accountant_id == viewer.user_id and rel.user_id == owner_id
            for rel in relationships
        )
    return False


def require_access(
    viewer: User,
    owner_id: int,
    relationships: Iterable[AccountantUserRelationship],
) -> None:
    """
    Raise AccessDeniedError unless viewer may read owner_id's data.
    """
    if not can_view_user_data(viewer, owner_id, relationships):
        raise AccessDeniedError(
            f"User {viewer.user_id} has no access to data of user {owner_id}"
        )


def visible_user_ids(
    viewer: User,
    users: Iterable[User],
    relationships: Iterable[AccountantUserRelationship],
) -> List[int]:
    """
    Ids of USER-role accounts whose data an overall statistic may include.
    """
    relationships = list(relationships)
    return [
        user.user_id
        for user in users
        if user.role == Role.USER and can_view_user_data(viewer, user.user_id, relationships)
    ]


def require_self_or_admin(viewer: User, owner_id: int) -> None:
    """
    Raise AccessDeniedError unless viewer is owner_id or an admin.

    Relationship requests are private to their parties; an accountant link
    does not extend to them.
    """
    if viewer.role != Role.ADMIN and viewer.user_id != owner_id:
        raise AccessDeniedError(
            f"User {viewer.user_id} has no access to requests of user {owner_id}"
        )
