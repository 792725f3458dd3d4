"""Starlette ASGI binding for a ``Gateway``.

Single POST endpoint; any other method on the path is answered with 405
by Starlette's router.

    app = create_app(gateway)
    uvicorn.run(app, host="127.0.0.1", port=8080)
"""

from __future__ import annotations

import logging
from typing import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from gateway.pipeline import Gateway

log = logging.getLogger(__name__)


# ── App factory ──────────────────────────────────────────────────────


def create_app(
    gateway: Gateway,
    path: str = "/",
    allow_origins: Sequence[str] = ("*",),
    debug: bool = False,
) -> Starlette:
    """Wrap *gateway* in a Starlette app serving ``POST path``."""

    async def ccip_endpoint(request: Request) -> JSONResponse:
        body = await request.body()
        resp = await gateway.handle(body)
        return JSONResponse(resp.payload, status_code=resp.status)

    middleware = []
    if allow_origins:
        middleware.append(
            Middleware(
                CORSMiddleware,
                allow_origins=list(allow_origins),
                allow_methods=["POST"],
                allow_headers=["Content-Type"],
            )
        )

    log.debug("serving %d method(s) on POST %s", len(gateway.methods), path)
    return Starlette(
        debug=debug,
        routes=[Route(path, ccip_endpoint, methods=["POST"])],
        middleware=middleware,
    )
