from typing import List
from sqlalchemy.orm import Session

from learnhub.crud.base import CRUDBase
from learnhub.models.chat_message import ChatMessage
from learnhub.schemas.chat import ChatMessage as ChatMessageSchema


class CRUDChatMessage(CRUDBase[ChatMessage, ChatMessageSchema, ChatMessageSchema]):

    def get_history(self, db: Session, *, user_id: int, limit: int = 50) -> List[ChatMessage]:
        """The newest ``limit`` messages, returned oldest first."""
        recent = (
            db.query(ChatMessage)
            .filter(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(recent))

chat_message = CRUDChatMessage(ChatMessage)
