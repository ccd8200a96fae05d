# toolroom/api/functions.py
"""
Routes mounted under /functions/v1, kept call-compatible with the hosted
edge functions the browser client used to call: errors are returned as
``{"error": "..."}`` with the gateway's status code.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from toolroom.core.logging import get_logger
from toolroom.db.deps import get_db
from toolroom.services import currency_service
from toolroom.services.ai_gateway import AIGateway, AIGatewayError, get_ai_gateway

logger = get_logger(__name__)

router = APIRouter(tags=["functions"])


class ChatMessage(BaseModel):
    role: str = "user"
    content: str = ""
    imageUrl: str | None = None


class ChatIn(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)


class QuizIn(BaseModel):
    level: str = "easy"
    language: str = "tr"
    topic: str | None = None


def _error(exc: AIGatewayError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@router.post("/cnc-ai-chat")
async def cnc_ai_chat(
    payload: ChatIn,
    stream: bool = Query(True),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    messages = [m.model_dump(exclude_none=True) for m in payload.messages]
    try:
        if not stream:
            return {"content": await gateway.collect_chat(messages)}
        chunks = await gateway.open_chat_stream(messages)
    except AIGatewayError as exc:
        logger.warning("chat_failed", status_code=exc.status_code)
        return _error(exc)

    return StreamingResponse(chunks, media_type="text/event-stream")


@router.post("/generate-quiz")
async def generate_quiz(payload: QuizIn, gateway: AIGateway = Depends(get_ai_gateway)):
    try:
        return await gateway.generate_quiz(payload.level, payload.language, payload.topic)
    except AIGatewayError as exc:
        logger.warning("quiz_failed", status_code=exc.status_code)
        return _error(exc)


@router.post("/update-currency-forecasts")
async def update_currency_forecasts(
    db: Session = Depends(get_db),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    return await currency_service.update_forecasts(db, gateway)
