"""
Book API — Documentation Routes
===============================

What:  Serves the generated OpenAPI document and a Swagger UI page for it.
How:   The document is built once by create_app() (see openapi.py) and kept
       on app.state.openapi_document; these handlers only read it.
Who:   Mounted by create_app() under settings.docs_path (default /docs).

    GET {docs_path}               → Swagger UI (HTML)
    GET {docs_path}/openapi.json  → OpenAPI document (JSON)

FastAPI's own /docs, /redoc and /openapi.json are disabled on the app, so
these are the only documentation endpoints.
"""

from fastapi import APIRouter, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

router = APIRouter(include_in_schema=False)


@router.get("", response_class=HTMLResponse)
async def swagger_ui(request: Request) -> HTMLResponse:
    """Interactive documentation page; the page title carries the API title and version."""
    config = request.app.state.settings
    root_path = request.scope.get("root_path", "").rstrip("/")
    return get_swagger_ui_html(
        openapi_url=root_path + config.openapi_path,
        title=f"{config.api_title} {config.api_version}",
    )


@router.get("/openapi.json")
async def openapi_document(request: Request) -> JSONResponse:
    return JSONResponse(request.app.state.openapi_document)
