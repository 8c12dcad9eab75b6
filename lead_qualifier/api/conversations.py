"""
Chat widget endpoint: one inbound message in, one assistant reply out.
"""

import logging
import uuid

from fastapi import APIRouter, Depends

from lead_qualifier.api.dependencies import get_orchestrator
from lead_qualifier.constants.statuses import STATUS_IN_PROGRESS
from lead_qualifier.schemas.conversations import MessageRequest, MessageResponse
from lead_qualifier.services.conversation import ConversationOrchestrator
from lead_qualifier.services.dialogue_policy import FALLBACK_GREETING

logger = logging.getLogger(__name__)

router = APIRouter()


def new_conversation_id() -> str:
    return f"conv_{uuid.uuid4().hex}"


@router.post("/{customer_id}/message", response_model=MessageResponse)
async def post_message(
    customer_id: str,
    body: MessageRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Process a chat message for a customer's widget.

    Always returns 200 with a reply: the chat user never sees a raw error.
    """
    conversation_id = body.conversation_id or new_conversation_id()
    try:
        result = await orchestrator.handle_message(customer_id, conversation_id, body.message)
    except Exception as e:
        # Unexpected failure: log with traceback, still answer the widget
        logger.exception(f"Unhandled error processing message for conversation {conversation_id}: {e}")
        return MessageResponse(
            response=FALLBACK_GREETING,
            conversation_id=conversation_id,
            lead_status=STATUS_IN_PROGRESS,
            persisted=False,
        )

    return MessageResponse(
        response=result.reply,
        conversation_id=conversation_id,
        lead_status=result.lead_status,
        persisted=result.persisted,
    )
