# grain/routers/coach.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from grain.config import Settings
from grain.llm import coach
from grain.routers.plans import get_settings
from models import ChatReply, ChatRequest

router = APIRouter(tags=["coach"])


@router.post("/api/ask-grain", response_model=ChatReply)
def ask_grain(req: ChatRequest, settings: Settings = Depends(get_settings)):
    messages = [{"role": m.role, "text": m.text} for m in req.messages]
    try:
        reply = coach.ask_coach(messages, req.context, settings=settings)
    except coach.CoachError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    return {"reply": reply}
