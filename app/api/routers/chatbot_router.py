"""
app/api/routers/chatbot_router.py

Conversational Q&A endpoint.

POST /api/chatbot

Body: {messages: [{role: "user"|"assistant"|"system", content}], language?}
Returns: {reply, topic, year}
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import require_caller
from app.schemas.reports import ChatRequest
from app.services.report_service import ReportService, get_report_service
from llm_synthesis.schema import ChatReply

router = APIRouter(prefix="/api", tags=["chatbot"])


@router.post(
    "/chatbot",
    response_model=ChatReply,
    status_code=status.HTTP_200_OK,
)
def chatbot(
    body: ChatRequest,
    _caller: dict = Depends(require_caller),
    service: ReportService = Depends(get_report_service),
) -> ChatReply:
    return service.chat(body)
