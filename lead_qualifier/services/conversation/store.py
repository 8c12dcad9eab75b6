"""
Conversation/customer store.

The orchestrator depends only on the ConversationStore contract;
SqlConversationStore implements it over a SQLAlchemy session. Every store
failure surfaces as PersistenceError with the session rolled back.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lead_qualifier.db.models import Conversation, ConversationTurn, Customer
from lead_qualifier.services.conversation.state import ConversationState, Turn
from lead_qualifier.services.errors import NotFoundError, PersistenceError
from lead_qualifier.services.profiles import CustomerProfile

logger = logging.getLogger(__name__)


class ConversationStore(ABC):
    """Storage contract used by the conversation orchestrator."""

    @abstractmethod
    async def get_profile(self, customer_id: str) -> CustomerProfile:
        """Raises NotFoundError for an unknown customer."""

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> ConversationState:
        """Raises NotFoundError for an unknown conversation."""

    @abstractmethod
    async def append_turn(self, conversation_id: str, customer_id: str, turn: Turn) -> None:
        """Append a turn, creating the conversation on first use."""

    @abstractmethod
    async def save_fields(
        self,
        conversation_id: str,
        customer_id: str,
        fields: Mapping[str, Any],
        status: str,
        mark_notified: bool = False,
    ) -> None:
        """
        Store merged fields and status. mark_notified records that the
        qualified-lead notification has been claimed (never unset).
        """

    async def save_turn(
        self,
        conversation_id: str,
        customer_id: str,
        turns: Sequence[Turn],
        fields: Mapping[str, Any],
        status: str,
        mark_notified: bool = False,
    ) -> None:
        """
        Store a whole turn: its messages, the merged fields, status and claim.

        Stores that can write atomically override this so a failure leaves
        nothing behind. The default writes piece by piece.
        """
        for turn in turns:
            await self.append_turn(conversation_id, customer_id, turn)
        await self.save_fields(conversation_id, customer_id, fields, status, mark_notified=mark_notified)

    async def record_event(
        self,
        level: str,
        event_type: str,
        conversation_id: str | None = None,
        payload: dict | None = None,
    ) -> None:
        """Operational telemetry hook. Stores without an event log ignore it."""
        return None


class SqlConversationStore(ConversationStore):
    def __init__(self, db: Session):
        self.db = db

    def _persistence_error(self, operation: str, exc: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(f"Store {operation} failed: {exc}")
        return PersistenceError(f"{operation} failed: {exc}")

    def _find_conversation(self, conversation_id: str, lock_row: bool = False) -> Conversation | None:
        stmt = select(Conversation).where(Conversation.conversation_id == conversation_id)
        if lock_row:
            # Held until save_turn commits, serializing writers across processes.
            # SQLite ignores FOR UPDATE.
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def _get_or_create_conversation(self, conversation_id: str, customer_id: str) -> Conversation:
        conversation = self._find_conversation(conversation_id)
        if conversation is None:
            conversation = Conversation(
                conversation_id=conversation_id,
                customer_id=customer_id,
                lead_fields={},
            )
            self.db.add(conversation)
            self.db.flush()
            logger.info(f"Created conversation {conversation_id} for customer {customer_id}")
        return conversation

    async def get_profile(self, customer_id: str) -> CustomerProfile:
        try:
            stmt = select(Customer).where(Customer.customer_id == customer_id)
            customer = self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._persistence_error("get_profile", e) from e
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        return CustomerProfile.from_model(customer)

    async def get_conversation(self, conversation_id: str) -> ConversationState:
        try:
            conversation = self._find_conversation(conversation_id, lock_row=True)
            if conversation is None:
                raise NotFoundError(f"Conversation {conversation_id} not found")
            turns = [
                Turn(role=t.role, message=t.message, timestamp=t.created_at)
                for t in conversation.turns
            ]
        except SQLAlchemyError as e:
            raise self._persistence_error("get_conversation", e) from e
        return ConversationState(
            conversation_id=conversation.conversation_id,
            customer_id=conversation.customer_id,
            turns=turns,
            fields=dict(conversation.lead_fields or {}),
            lead_status=conversation.lead_status,
            qualified_notified=conversation.qualified_notified_at is not None,
        )

    def _add_turn(self, conversation: Conversation, turn: Turn) -> None:
        self.db.add(
            ConversationTurn(
                conversation_pk=conversation.id,
                role=turn.role,
                message=turn.message,
                created_at=turn.timestamp,
            )
        )

    def _apply_fields(
        self, conversation: Conversation, fields: Mapping[str, Any], status: str, mark_notified: bool
    ) -> None:
        # Reassign (not mutate) so the JSON column is flagged dirty
        conversation.lead_fields = dict(fields)
        conversation.lead_status = status
        if mark_notified and conversation.qualified_notified_at is None:
            conversation.qualified_notified_at = func.now()

    async def append_turn(self, conversation_id: str, customer_id: str, turn: Turn) -> None:
        try:
            conversation = self._get_or_create_conversation(conversation_id, customer_id)
            self._add_turn(conversation, turn)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._persistence_error("append_turn", e) from e

    async def save_fields(
        self,
        conversation_id: str,
        customer_id: str,
        fields: Mapping[str, Any],
        status: str,
        mark_notified: bool = False,
    ) -> None:
        try:
            conversation = self._get_or_create_conversation(conversation_id, customer_id)
            self._apply_fields(conversation, fields, status, mark_notified)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._persistence_error("save_fields", e) from e

    async def save_turn(
        self,
        conversation_id: str,
        customer_id: str,
        turns: Sequence[Turn],
        fields: Mapping[str, Any],
        status: str,
        mark_notified: bool = False,
    ) -> None:
        """
        One commit for the whole turn. The row lock taken by get_conversation
        is held until here, so the notification claim cannot be read stale.
        """
        try:
            conversation = self._get_or_create_conversation(conversation_id, customer_id)
            for turn in turns:
                self._add_turn(conversation, turn)
            self._apply_fields(conversation, fields, status, mark_notified)
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._persistence_error("save_turn", e) from e

    async def record_event(
        self,
        level: str,
        event_type: str,
        conversation_id: str | None = None,
        payload: dict | None = None,
    ) -> None:
        from lead_qualifier.services.system_event_service import log_event

        try:
            log_event(self.db, level, event_type, conversation_id=conversation_id, payload=payload)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record system event {event_type} for {conversation_id}: {e}")
