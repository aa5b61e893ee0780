"""Pass-through relay to the upstream snapshot host."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from balloonwatch.config import settings

router = APIRouter(prefix="/api/windborne", tags=["relay"])

logger = logging.getLogger("balloonwatch.relay")

RELAY_HEADERS = {"Cache-Control": "no-store", "Access-Control-Allow-Origin": "*"}
DEFAULT_CONTENT_TYPE = "application/json; charset=utf-8"


def get_relay_transport() -> httpx.AsyncBaseTransport | None:
    """Transport used for upstream calls; overridden in tests."""

    return None


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    summary="Relay a request to the upstream host",
)
async def relay(
    path: str,
    request: Request,
    transport: httpx.AsyncBaseTransport | None = Depends(get_relay_transport),
) -> Response:
    upstream = f"{settings.relay_upstream_url.rstrip('/')}/{path}"
    body = await request.body()

    try:
        async with httpx.AsyncClient(
            timeout=settings.relay_timeout, transport=transport
        ) as client:
            upstream_response = await client.request(
                request.method,
                upstream,
                params=list(request.query_params.multi_items()),
                content=body or None,
                headers={"User-Agent": "balloonwatch"},
            )
    except httpx.HTTPError as exc:
        logger.warning("Relay to %s failed: %s", upstream, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "proxy_upstream_failed", "message": str(exc)},
            headers=RELAY_HEADERS,
        )

    logger.debug("Relayed %s %s -> %s", request.method, upstream, upstream_response.status_code)
    return Response(
        content=upstream_response.content,
        status_code=upstream_response.status_code,
        headers={
            **RELAY_HEADERS,
            "Content-Type": upstream_response.headers.get("content-type")
            or DEFAULT_CONTENT_TYPE,
        },
    )
