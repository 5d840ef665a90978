# =============================================================================
# app/cors.py - CORS Helpers
# =============================================================================
# The API is public and read-only, so every response allows any origin.
# Browser preflights are answered by Starlette's CORSMiddleware (main.py);
# plain OPTIONS requests reach the per-route handlers built here.
# =============================================================================

from fastapi import Request, Response


PREFLIGHT_MAX_AGE = "86400"


def preflight_response(methods: str) -> Response:
    """
    Empty 200 response describing what a route accepts.

    Args:
        methods: Comma-separated methods, e.g. "GET, POST, OPTIONS"
    """
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": methods,
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": PREFLIGHT_MAX_AGE,
        },
    )


async def allow_any_origin(request: Request, call_next) -> Response:
    """HTTP middleware: make sure every response carries Access-Control-Allow-Origin."""
    response = await call_next(request)
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    return response
