from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from learnhub.models.user import User as UserModel
from learnhub.schemas.chat import ChatSend, ChatMessage, ChatExchange, Recommendation, Resume
from learnhub.schemas.response import APIResponse
from learnhub.services.chat import chat_service, ResponseGenerator
from learnhub.utils import deps

router = APIRouter()


@router.get("/history", response_model=APIResponse[List[ChatMessage]])
def get_chat_history(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user),
    limit: int = Query(50, ge=1, le=200)
):
    messages = chat_service.get_history(db, current_user=current_user, limit=limit)
    return APIResponse(message="Chat history retrieved successfully", data=messages)


@router.post("/send", response_model=APIResponse[ChatExchange], status_code=status.HTTP_201_CREATED)
def send_chat_message(
    *,
    db: Session = Depends(deps.get_transactional_db),
    chat_in: ChatSend,
    current_user: UserModel = Depends(deps.get_current_user),
    generate_reply: ResponseGenerator = Depends(deps.get_response_generator)
):
    exchange = chat_service.send_message(db, chat_in=chat_in, current_user=current_user, generate_reply=generate_reply)
    return APIResponse(message="Message sent successfully", data=exchange)


@router.get("/recommendations", response_model=APIResponse[List[Recommendation]])
def get_recommendations(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    recommendations = chat_service.get_recommendations(db, current_user=current_user)
    return APIResponse(message="Recommendations retrieved successfully", data=recommendations)


@router.get("/resume", response_model=APIResponse[Resume])
def get_resume(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    resume = chat_service.get_resume(db, current_user=current_user)
    return APIResponse(message="Resume generated successfully", data=resume)


@router.delete("/messages/{message_id}", response_model=APIResponse[None])
def delete_chat_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    chat_service.delete_message(db, message_id=message_id, current_user=current_user)
    return APIResponse(message="Message deleted successfully")
