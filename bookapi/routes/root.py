"""
Book API — Root Route
=====================

What:  GET / returns a static plain-text greeting.
Who:   Humans and uptime probes checking that the server answers at all.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def greeting(request: Request) -> str:
    return request.app.state.settings.greeting
