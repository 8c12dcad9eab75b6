"""
Conversation orchestrator - runs one qualification turn per inbound message.

Per turn (serialized per conversation_id):
1. load profile (unknown customer -> default profile) and prior state
2. extract fields from the new message only
3. merge, first-write-wins
4. evaluate status and record the transition
5. reply via the generative responder, falling back to the dialogue policy
6. persist both turns, fields, status and the notification claim in one write
7. on the first qualifying turn, claim and send the notification

The reply is always produced: store failures are reported on the result
(persisted=False) and logged, responder and notifier failures are logged.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from lead_qualifier.constants.event_types import (
    EVENT_LEAD_DISQUALIFIED,
    EVENT_LEAD_QUALIFIED,
    EVENT_NOTIFICATION_FAILURE,
    EVENT_NOTIFICATION_SENT,
    EVENT_RESPONDER_FALLBACK,
    EVENT_STATUS_REGRESSION,
)
from lead_qualifier.constants.statuses import (
    ROLE_ASSISTANT,
    ROLE_USER,
    STATUS_DISQUALIFIED,
    STATUS_QUALIFIED,
)
from lead_qualifier.services.conversation.locks import ConversationLocks
from lead_qualifier.services.conversation.state import ConversationState, Turn
from lead_qualifier.services.conversation.store import ConversationStore
from lead_qualifier.services.dialogue_policy import reply_for_message
from lead_qualifier.services.errors import NotFoundError, PersistenceError
from lead_qualifier.services.extraction import extract
from lead_qualifier.services.metadata_merge import merge, newly_learned
from lead_qualifier.services.notifications import NotificationSink
from lead_qualifier.services.profiles import CustomerProfile, ProfileDefaults
from lead_qualifier.services.qualification import assess
from lead_qualifier.services.responder.base import GenerativeResponder
from lead_qualifier.services.state_machine import (
    record_transition,
    should_fire_qualified_notification,
)

logger = logging.getLogger(__name__)


@dataclass
class OrchestratorDeps:
    """Everything a turn talks to. Built per request; tests pass doubles."""

    store: ConversationStore
    notifier: NotificationSink
    responder: GenerativeResponder | None = None
    defaults: ProfileDefaults = field(default_factory=ProfileDefaults)
    locks: ConversationLocks = field(default_factory=ConversationLocks)


@dataclass
class TurnResult:
    conversation_id: str
    reply: str
    lead_status: str
    previous_status: str
    fields: dict[str, Any]
    learned_fields: list[str] = field(default_factory=list)
    persisted: bool = True
    notified: bool = False
    used_responder: bool = False


class ConversationOrchestrator:
    def __init__(self, deps: OrchestratorDeps):
        self.deps = deps

    async def handle_message(self, customer_id: str, conversation_id: str, message: str) -> TurnResult:
        """Process one inbound message. Turns for the same conversation run one at a time."""
        async with self.deps.locks.lock_for(conversation_id):
            return await self._run_turn(customer_id, conversation_id, message)

    async def _load_profile(self, customer_id: str) -> CustomerProfile:
        try:
            return await self.deps.store.get_profile(customer_id)
        except NotFoundError:
            logger.warning(f"Customer {customer_id} not found - using default profile")
        except PersistenceError as e:
            logger.error(f"Could not load customer {customer_id} - using default profile: {e}")
        return self.deps.defaults.profile_for(customer_id)

    async def _load_state(self, conversation_id: str, customer_id: str) -> tuple[ConversationState, bool]:
        """Returns (state, readable). An unreadable store means this turn must not write."""
        try:
            return await self.deps.store.get_conversation(conversation_id), True
        except NotFoundError:
            logger.info(f"Starting new conversation {conversation_id} for customer {customer_id}")
            return ConversationState.new(conversation_id, customer_id), True
        except PersistenceError as e:
            logger.error(f"Could not load conversation {conversation_id} - running on empty state: {e}")
            return ConversationState.new(conversation_id, customer_id), False

    async def _compose_reply(
        self,
        message: str,
        fields: dict[str, Any],
        status: str,
        profile: CustomerProfile,
        state: ConversationState,
    ) -> tuple[str, bool, Exception | None]:
        """
        Returns (reply, used_responder, responder_error). Rejections are always
        deterministic. The fallback event is recorded by the caller after the
        turn is stored, so no commit lands between load and save.
        """
        responder = self.deps.responder
        if responder is not None and status != STATUS_DISQUALIFIED:
            try:
                reply = await responder.generate(message, fields, status, profile, state.history)
                return reply, True, None
            except Exception as e:
                # Any responder failure falls back; the turn must not abort
                logger.warning(
                    f"Generative responder failed for conversation {state.conversation_id} "
                    f"({type(e).__name__}: {e}) - using dialogue policy"
                )
                return reply_for_message(message, fields, status, profile), False, e
        return reply_for_message(message, fields, status, profile), False, None

    async def _persist(
        self,
        state: ConversationState,
        user_turn: Turn,
        assistant_turn: Turn,
        fields: dict[str, Any],
        status: str,
        claim_notification: bool,
    ) -> bool:
        try:
            await self.deps.store.save_turn(
                state.conversation_id,
                state.customer_id,
                [user_turn, assistant_turn],
                fields,
                status,
                mark_notified=claim_notification,
            )
        except PersistenceError as e:
            logger.error(f"Failed to persist turn for conversation {state.conversation_id}: {e}")
            return False
        return True

    async def _record_responder_fallback(self, conversation_id: str, exc: Exception) -> None:
        await self.deps.store.record_event(
            "WARN",
            EVENT_RESPONDER_FALLBACK,
            conversation_id=conversation_id,
            payload={"error_type": type(exc).__name__, "message": str(exc)[:200]},
        )

    async def _notify(self, profile: CustomerProfile, fields: dict[str, Any], conversation_id: str) -> bool:
        try:
            delivered = await self.deps.notifier.notify_qualified(profile, fields, conversation_id)
        except Exception as e:
            # Notification failures are reported, never raised into the turn
            logger.error(f"Qualified notification raised for conversation {conversation_id}: {e}")
            delivered = False

        if delivered:
            await self.deps.store.record_event("INFO", EVENT_NOTIFICATION_SENT, conversation_id=conversation_id)
        else:
            logger.error(f"Qualified lead notification failed for conversation {conversation_id}")
            await self.deps.store.record_event(
                "ERROR",
                EVENT_NOTIFICATION_FAILURE,
                conversation_id=conversation_id,
                payload={"customer_id": profile.customer_id},
            )
        return delivered

    async def _record_status_change(self, conversation_id: str, previous: str, status: str, reason: str | None) -> None:
        if previous == status:
            return
        record_transition(conversation_id, previous, status)
        if status == STATUS_QUALIFIED:
            await self.deps.store.record_event("INFO", EVENT_LEAD_QUALIFIED, conversation_id=conversation_id)
        elif status == STATUS_DISQUALIFIED:
            event_type = EVENT_STATUS_REGRESSION if previous == STATUS_QUALIFIED else EVENT_LEAD_DISQUALIFIED
            await self.deps.store.record_event(
                "INFO", event_type, conversation_id=conversation_id, payload={"reason": reason}
            )

    async def _run_turn(self, customer_id: str, conversation_id: str, message: str) -> TurnResult:
        profile = await self._load_profile(customer_id)
        state, readable = await self._load_state(conversation_id, customer_id)
        user_turn = Turn(role=ROLE_USER, message=message)

        extracted = extract(message)
        fields = merge(state.fields, extracted)
        learned = newly_learned(state.fields, fields)
        if learned:
            logger.info(f"Conversation {conversation_id} learned fields: {', '.join(learned)}")

        assessment = assess(fields, profile)
        status = assessment.status

        reply, used_responder, responder_error = await self._compose_reply(
            message, fields, status, profile, state
        )
        assistant_turn = Turn(role=ROLE_ASSISTANT, message=reply)

        result = TurnResult(
            conversation_id=conversation_id,
            reply=reply,
            lead_status=status,
            previous_status=state.lead_status,
            fields=fields,
            learned_fields=learned,
            used_responder=used_responder,
        )

        claim = False
        if readable:
            claim = should_fire_qualified_notification(status, state.qualified_notified)
            result.persisted = await self._persist(state, user_turn, assistant_turn, fields, status, claim)
        else:
            # Prior state unknown: writing now could clobber stored fields
            result.persisted = False

        if responder_error is not None:
            await self._record_responder_fallback(conversation_id, responder_error)

        if not result.persisted:
            # The claim was not recorded; sending now could fire twice
            return result

        await self._record_status_change(
            conversation_id, state.lead_status, status, assessment.disqualification_reason
        )

        if claim:
            result.notified = await self._notify(profile, fields, conversation_id)

        return result
