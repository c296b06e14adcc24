"""Catch-all route feeding both protocol generations to the handler."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

router = APIRouter()

# OPTIONS is answered here only when CORS preflight headers are absent
METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
async def dispatch(request: Request, path: str) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200)

    body = await request.body()
    response = await request.app.state.handler.handle(
        request.method, request.url.path, body
    )
    return JSONResponse(response.content, status_code=response.status_code)
