"""Router for the Chat feature."""
from typing import List
from uuid import UUID

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.di.container import ApplicationContainer as DependencyContainer
from api.features.chat.controller import ChatController
from api.features.chat.dtos import (
    ChatResponse,
    ConversationHistoryItem,
    SendMessageRequest,
)
from api.features.chat.exceptions import CompletionError, ConversationNotFoundError
from api.shared.db import get_db_session
from api.shared.dtos import HealthCheckResponse
from api.shared.exceptions import ValidationError
from api.shared.response import ResponseModel

router = APIRouter()
logger = structlog.get_logger("chat.router")

UNEXPECTED_ERROR = "An unexpected error occurred"


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    """Health check endpoint for chat service."""
    return ResponseModel.success(
        data=HealthCheckResponse(
            status="healthy", dependencies={"database": "ok", "completion": "ok"}
        ),
        message="Chat service is healthy",
    )


@router.post("", response_model=ChatResponse, status_code=status.HTTP_200_OK)
@inject
async def send_message(
    request: SendMessageRequest,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Send a message and return the updated conversation."""
    try:
        return await controller.send_message(request, db_session=db_session)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except CompletionError as e:
        raise HTTPException(status_code=500, detail=e.message)
    except Exception:
        logger.exception("send_message_unexpected_error")
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)


@router.get("/conversation/history", response_model=List[ConversationHistoryItem])
@inject
async def get_conversation_history(
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """List summaries of the most recent conversations."""
    try:
        return await controller.get_conversation_history(db_session=db_session)
    except Exception:
        logger.exception("get_conversation_history_unexpected_error")
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)


@router.get("/conversation/{conversation_id}", response_model=ChatResponse)
@inject
async def get_conversation(
    conversation_id: UUID,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Get a conversation with all of its messages."""
    try:
        return await controller.get_conversation(conversation_id, db_session=db_session)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Exception:
        logger.exception("get_conversation_unexpected_error", conversation_id=str(conversation_id))
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)


@router.put(
    "/conversation/{conversation_id}/close",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
@inject
async def finish_conversation(
    conversation_id: UUID,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Close an active conversation."""
    try:
        await controller.finish_conversation(conversation_id, db_session=db_session)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Exception:
        logger.exception("finish_conversation_unexpected_error", conversation_id=str(conversation_id))
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
