from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates

from tasklens.core.presentation.view import MAX_RESPONSE_CHARS

from .deps import SESSION_COOKIE, get_session_registry

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@router.get("")
def ui_index(request: Request):
    dispatcher = get_session_registry().get(request.cookies.get(SESSION_COOKIE))
    message = dispatcher.state_message()
    response = templates.TemplateResponse(
        request,
        "index.html",
        {
            "session_id": dispatcher.session_id,
            "view": message.view,
            "max_chars": MAX_RESPONSE_CHARS,
        },
    )
    response.set_cookie(SESSION_COOKIE, value=dispatcher.session_id or "", httponly=False, samesite="lax")
    return response
