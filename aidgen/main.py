import json
import logging
import time
import uuid
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import (
    AUDIT_LOG_PATH, CORS_ORIGINS, HOST, LOG_LEVEL, OPENAI_API_KEY, OPENAI_API_URL, PORT,
    UPSTREAM_TIMEOUT,
)
from .relay import Relay

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def write_audit(path: str, entry: Dict[str, Any]):
    if not path:
        return
    line = json.dumps(entry)
    try:
        with open(path, "a") as f:
            f.write(line + "\n")
    except OSError as e:
        logger.warning("audit write to %s failed: %s", path, e)


def get_trace_id():
    return str(uuid.uuid4())


async def relay_request(request: Request) -> JSONResponse:
    relay: Relay = request.app.state.relay
    audit = {"trace_id": get_trace_id(), "fields": [], "status": None, "timestamp": int(time.time())}
    body = await request.body() if request.method == "POST" else b""
    status_code, content = await relay.handle(request.method, body, audit)
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, audit["status"])
    write_audit(request.app.state.audit_log_path, audit)
    return JSONResponse(content, status_code=status_code)


async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # framework errors (404, 405 on /generate) share the relay's error shape
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def create_app(
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    audit_log_path: Optional[str] = None,
) -> FastAPI:
    app = FastAPI(title="AidGen Relay", version=__version__)
    app.state.relay = Relay(
        api_key=OPENAI_API_KEY if api_key is None else api_key,
        api_url=OPENAI_API_URL,
        client=client,
        timeout=UPSTREAM_TIMEOUT,
    )
    app.state.audit_log_path = AUDIT_LOG_PATH if audit_log_path is None else audit_log_path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error)

    # method-specific handler
    app.add_api_route("/generate", relay_request, methods=["POST"])
    # generic dispatcher: answers every method, relays only POST
    app.add_api_route("/", relay_request, methods=ALL_METHODS)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def run():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("aidgen.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
