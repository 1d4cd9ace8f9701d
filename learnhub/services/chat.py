import logging
from typing import Callable, List

from sqlalchemy.orm import Session

from learnhub.core.exceptions import Forbidden, NotFound
from learnhub.crud.certificate import certificate as crud_certificate
from learnhub.crud.chat_message import chat_message as crud_chat_message
from learnhub.crud.course import course as crud_course
from learnhub.models.user import User
from learnhub.schemas.chat import ChatExchange, ChatMessage, ChatSend, Recommendation, Resume

logger = logging.getLogger(__name__)

ResponseGenerator = Callable[[str, str], str]

_CANNED_REPLIES = (
    ("help", "I can help you find courses, review lessons, or explain quiz answers. What would you like to do?"),
    ("quiz", "Quizzes are scored out of 100. Review the lesson content first, then try the quiz again."),
    ("simulate", "Simulations are not available yet, but the lessons in your enrolled courses cover the same material."),
)


def default_response_generator(message: str, context: str) -> str:
    """Keyword placeholder until a real assistant is wired in."""
    lowered = message.lower()
    for keyword, reply in _CANNED_REPLIES:
        if keyword in lowered:
            return reply
    return f"Thanks for your message about {context}. A learning assistant will be available soon."


class ChatService:

    def get_history(self, db: Session, *, current_user: User, limit: int = 50) -> List[ChatMessage]:
        messages = crud_chat_message.get_history(db, user_id=current_user.id, limit=limit)
        return [ChatMessage.model_validate(m) for m in messages]

    def send_message(
        self, db: Session, *, chat_in: ChatSend, current_user: User, generate_reply: ResponseGenerator
    ) -> ChatExchange:
        user_message = crud_chat_message.create(db, obj_in={
            "user_id": current_user.id,
            "content": chat_in.message,
            "is_ai": False,
            "context": chat_in.context,
        })
        reply = generate_reply(chat_in.message, chat_in.context)
        ai_message = crud_chat_message.create(db, obj_in={
            "user_id": current_user.id,
            "content": reply,
            "is_ai": True,
            "context": chat_in.context,
            "meta": {"replyTo": user_message.id},
        })
        return ChatExchange(
            user_message=ChatMessage.model_validate(user_message),
            ai_message=ChatMessage.model_validate(ai_message),
        )

    def get_recommendations(self, db: Session, *, current_user: User) -> List[Recommendation]:
        courses = crud_course.get_published_not_enrolled(db, user_id=current_user.id, limit=3)
        return [
            Recommendation(
                course_id=course.id,
                title=course.title,
                category=course.category,
                reason=f"A published {course.category} course you have not started yet.",
            )
            for course in courses
        ]

    def get_resume(self, db: Session, *, current_user: User) -> Resume:
        certificates = crud_certificate.get_by_user(db, user_id=current_user.id)
        titles = [c.course.title for c in certificates]
        skills = list(dict.fromkeys(c.course.category for c in certificates))
        if titles:
            summary = f"{current_user.name} has completed {len(titles)} course(s): {', '.join(titles)}."
        else:
            summary = f"{current_user.name} has not completed any courses yet."
        return Resume(
            name=current_user.name,
            email=current_user.email,
            completed_courses=titles,
            skills=skills,
            summary=summary,
        )

    def delete_message(self, db: Session, *, message_id: int, current_user: User) -> None:
        message = crud_chat_message.get(db, id=message_id)
        if not message:
            raise NotFound("Message not found.")
        if message.user_id != current_user.id:
            raise Forbidden("You can only delete your own messages.")
        crud_chat_message.delete(db, id=message_id)
        logger.info(f"Chat message {message_id} deleted by user {current_user.id}")

chat_service = ChatService()
