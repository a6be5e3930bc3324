"""
Accountant/user relationship requests.

Either side may ask to be linked. The other side approves or rejects; an
approval replaces any earlier accountant of the user and rejects the user's
other pending requests. A user has at most one accountant at a time.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from expense_tracker_mcp.core.exceptions import (
    AccessDeniedError,
    DuplicateRequestError,
    InvalidRequestError,
    RelationshipExistsError,
    RelationshipNotFoundError,
    RequestAlreadyProcessedError,
    RequestNotFoundError,
)
from expense_tracker_mcp.models.request import (
    AccountantRequest,
    AccountantUserRelationship,
    InitiatorType,
    RequestStatus,
)
from expense_tracker_mcp.models.user import Role, User

logger = logging.getLogger(__name__)


class RelationshipBook:
    """In-memory store of relationship requests and active relationships."""

    def __init__(
        self,
        requests: Optional[Iterable[AccountantRequest]] = None,
        relationships: Optional[Iterable[AccountantUserRelationship]] = None,
    ):
        self.requests: List[AccountantRequest] = list(requests or [])
        self.relationships: List[AccountantUserRelationship] = list(relationships or [])

    def _next_request_id(self) -> int:
        return max((req.request_id for req in self.requests), default=0) + 1

    def _find(self, request_id: int) -> AccountantRequest:
        for req in self.requests:
            if req.request_id == request_id:
                return req
        raise RequestNotFoundError(f"Request not found: {request_id}")

    def _replace(self, updated: AccountantRequest) -> None:
        self.requests = [
            updated if req.request_id == updated.request_id else req
            for req in self.requests
        ]

    def accountant_of(self, user_id: int) -> Optional[int]:
        """Id of the user's accountant, or None."""
        for rel in self.relationships:
            if rel.user_id == user_id:
                return rel.accountant_id
        return None

    def clients_of(self, accountant_id: int) -> List[int]:
        return [rel.user_id for rel in self.relationships if rel.accountant_id == accountant_id]

    def pending_between(self, accountant_id: int, user_id: int) -> Optional[AccountantRequest]:
        return next(
            (
                req
                for req in self.requests
                if req.accountant_id == accountant_id
                and req.user_id == user_id
                and req.status == RequestStatus.PENDING
            ),
            None,
        )

    def send_request(self, sender: User, recipient: User) -> AccountantRequest:
        """
        Create a pending request from sender to recipient.

        Args:
            sender: User or accountant asking to be linked
            recipient: The other side of the relationship

        Returns:
            The new PENDING request

        Raises:
            InvalidRequestError: If sender targets themself or the roles do not
                                 pair a USER with an ACCOUNTANT
            RelationshipExistsError: If the user already has an accountant
            DuplicateRequestError: If a pending request for the pair exists
        """
        if sender.user_id == recipient.user_id:
            raise InvalidRequestError("Cannot send a request to yourself")

        if sender.role == Role.ACCOUNTANT and recipient.role == Role.USER:
            accountant, user, initiator = sender, recipient, InitiatorType.ACCOUNTANT
        elif sender.role == Role.USER and recipient.role == Role.ACCOUNTANT:
            accountant, user, initiator = recipient, sender, InitiatorType.USER
        else:
            raise InvalidRequestError(
                "Requests must link a USER with an ACCOUNTANT, "
                f"got {sender.role.value} -> {recipient.role.value}"
            )

        if self.accountant_of(user.user_id) is not None:
            raise RelationshipExistsError(f"User {user.user_id} already has an accountant")

        if self.pending_between(accountant.user_id, user.user_id) is not None:
            raise DuplicateRequestError("A pending request already exists for this pair")

        request = AccountantRequest(
            request_id=self._next_request_id(),
            accountant_id=accountant.user_id,
            user_id=user.user_id,
            status=RequestStatus.PENDING,
            initiator=initiator,
            created_at=datetime.now(),
        )
        self.requests.append(request)
        logger.info(
            "Request %d sent: accountant=%d user=%d initiator=%s",
            request.request_id,
            accountant.user_id,
            user.user_id,
            initiator.value,
        )
        return request

    def approve(self, request_id: int, actor: User) -> AccountantUserRelationship:
        """
        Approve a pending request addressed to actor.

        Returns:
            The relationship created by the approval
        """
        request = self._find(request_id)

        if request.initiator == InitiatorType.USER:
            is_recipient = actor.user_id == request.accountant_id
        else:
            is_recipient = actor.user_id == request.user_id
        if not is_recipient:
            raise AccessDeniedError(f"User {actor.user_id} cannot approve request {request_id}")

        if request.status != RequestStatus.PENDING:
            raise RequestAlreadyProcessedError(
                f"Request {request_id} is already {request.status.value}"
            )

        self.relationships = [rel for rel in self.relationships if rel.user_id != request.user_id]

        for other in list(self.requests):
            if (
                other.user_id == request.user_id
                and other.status == RequestStatus.PENDING
                and other.request_id != request.request_id
            ):
                self._replace(other.model_copy(update={"status": RequestStatus.REJECTED}))

        relationship = AccountantUserRelationship(
            accountant_id=request.accountant_id,
            user_id=request.user_id,
            created_at=datetime.now(),
        )
        self.relationships.append(relationship)
        self._replace(request.model_copy(update={"status": RequestStatus.APPROVED}))

        logger.info(
            "Request %d approved: accountant=%d user=%d",
            request_id,
            request.accountant_id,
            request.user_id,
        )
        return relationship

    def reject(self, request_id: int, actor: User) -> AccountantRequest:
        """
        Reject a pending request. Either party may reject it, so a sender can
        also withdraw their own request.
        """
        request = self._find(request_id)

        if actor.user_id not in (request.accountant_id, request.user_id):
            raise AccessDeniedError(f"User {actor.user_id} cannot reject request {request_id}")

        if request.status != RequestStatus.PENDING:
            raise RequestAlreadyProcessedError(
                f"Request {request_id} is already {request.status.value}"
            )

        rejected = request.model_copy(update={"status": RequestStatus.REJECTED})
        self._replace(rejected)
        logger.info("Request %d rejected by user %d", request_id, actor.user_id)
        return rejected

    def remove_relationship(self, accountant_id: int, user_id: int, actor: User) -> None:
        """
        Unlink the pair and forget every request between them.

        Either party or an admin may remove the relationship.
        """
        if actor.role != Role.ADMIN and actor.user_id not in (accountant_id, user_id):
            raise AccessDeniedError(
                f"User {actor.user_id} cannot remove relationship "
                f"between accountant {accountant_id} and user {user_id}"
            )

        before = len(self.relationships)
        self.relationships = [
            rel
            for rel in self.relationships
            if not (rel.accountant_id == accountant_id and rel.user_id == user_id)
        ]
        if len(self.relationships) == before:
            raise RelationshipNotFoundError(
                f"No relationship between accountant {accountant_id} and user {user_id}"
            )

        self.requests = [
            req
            for req in self.requests
            if not (req.accountant_id == accountant_id and req.user_id == user_id)
        ]
        logger.info(
            "Relationship removed by user %d: accountant=%d user=%d",
            actor.user_id,
            accountant_id,
            user_id,
        )

    def snapshot(self) -> Tuple[List[AccountantRequest], List[AccountantUserRelationship]]:
        """Copy of the current state, for restore()."""
        return list(self.requests), list(self.relationships)

    def restore(
        self, state: Tuple[List[AccountantRequest], List[AccountantUserRelationship]]
    ) -> None:
        requests, relationships = state
        self.requests = list(requests)
        self.relationships = list(relationships)

    def incoming(self, party: User) -> List[AccountantRequest]:
        """Requests addressed to party, newest first."""
        if party.role == Role.ACCOUNTANT:
            result = [
                req
                for req in self.requests
                if req.accountant_id == party.user_id and req.initiator == InitiatorType.USER
            ]
        else:
            result = [
                req
                for req in self.requests
                if req.user_id == party.user_id and req.initiator == InitiatorType.ACCOUNTANT
            ]
        return sorted(result, key=lambda req: req.created_at, reverse=True)

    def outgoing(self, party: User) -> List[AccountantRequest]:
        """Requests sent by party, newest first."""
        if party.role == Role.ACCOUNTANT:
            result = [
                req
                for req in self.requests
                if req.accountant_id == party.user_id
                and req.initiator == InitiatorType.ACCOUNTANT
            ]
        else:
            result = [
                req
                for req in self.requests
                if req.user_id == party.user_id and req.initiator == InitiatorType.USER
            ]
        return sorted(result, key=lambda req: req.created_at, reverse=True)
