"""aiohttp integration.

Authenticates requests carrying ``Authorization: tma <initData>``, the
header format the Mini App frontend sends, and stores the decoded InitData
on the request. Uses the HMAC scheme when a bot token is configured and the
Ed25519 scheme when only a bot id is.
"""

import logging
import time

from aiohttp import web

from .config import Config
from .entities import ChatType, InitData, PropertyBag
from .errors import (
    ExpiredError, InitDataError, SignatureInvalidError, SignatureMissingError,
)
from .json_parser import InitDataJsonParser
from .web_auth import parse_init_data, validate_init_data, validate_init_data_3rd


logger = logging.getLogger(__name__)

INIT_DATA_KEY = "init_data"
AUTH_SCHEME = "tma "

# Failures that mean "not authenticated" rather than "malformed payload"
_UNAUTHORIZED_ERRORS = (SignatureMissingError, SignatureInvalidError, ExpiredError)


def _extract_init_data(request: web.Request) -> str | None:
    """Return the raw initData from the Authorization header, if present."""
    auth = request.headers.get("Authorization", "")
    if not auth.startswith(AUTH_SCHEME):
        return None
    return auth[len(AUTH_SCHEME):] or None


def authenticate(raw: str, config: Config, parser: InitDataJsonParser | None = None) -> InitData:
    """Validate raw initData with the configured scheme and decode it."""
    if config.bot_token:
        validate_init_data(raw, config.bot_token, config.options)
    else:
        validate_init_data_3rd(raw, config.bot_id, config.options)
    return parse_init_data(raw, parser)


def init_data_middleware(
    config: Config,
    parser: InitDataJsonParser | None = None,
    public_paths: frozenset[str] = frozenset(),
):
    """Create a middleware that rejects requests without valid initData."""
    if not config.bot_token and config.bot_id is None:
        raise ValueError("either bot_token or bot_id must be configured")

    @web.middleware
    async def middleware(request: web.Request, handler) -> web.StreamResponse:
        if request.method == "OPTIONS" or request.path in public_paths:
            return await handler(request)

        raw = _extract_init_data(request)
        if raw is None:
            return web.json_response(
                {"error": "missing or invalid Authorization header"}, status=401,
            )
        try:
            request[INIT_DATA_KEY] = authenticate(raw, config, parser)
        except _UNAUTHORIZED_ERRORS as e:
            logger.info("Rejected initData on %s %s: %s", request.method, request.path, e)
            return web.json_response({"error": str(e)}, status=401)
        except InitDataError as e:
            logger.info("Malformed initData on %s %s: %s", request.method, request.path, e)
            return web.json_response({"error": str(e)}, status=400)
        return await handler(request)

    return middleware


def get_init_data(request: web.Request) -> InitData:
    """Return the InitData stored by init_data_middleware."""
    return request[INIT_DATA_KEY]


def to_json(value):
    """Convert entities to JSON-friendly values."""
    if isinstance(value, PropertyBag):
        return {k: to_json(v) for k, v in value.properties.items()}
    if isinstance(value, ChatType):
        return value.value
    return value


async def handle_health(request: web.Request) -> web.Response:
    """GET /api/health: simple health check, no auth required."""
    return web.json_response({"status": "ok", "time": int(time.time())})


async def handle_init_data(request: web.Request) -> web.Response:
    """GET /api/init-data: echo the authenticated initData."""
    return web.json_response(to_json(get_init_data(request)))


@web.middleware
async def logging_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Log all incoming requests."""
    start = time.time()
    try:
        response = await handler(request)
        elapsed = (time.time() - start) * 1000
        logger.info("%s %s -> %s (%.0fms)", request.method, request.path, response.status, elapsed)
        return response
    except Exception as e:
        elapsed = (time.time() - start) * 1000
        logger.warning("%s %s -> ERROR: %s (%.0fms)", request.method, request.path, e, elapsed)
        raise


def create_web_app(config: Config, parser: InitDataJsonParser | None = None) -> web.Application:
    """Create an aiohttp application with initData authentication."""
    auth = init_data_middleware(config, parser, public_paths=frozenset({"/api/health"}))
    app = web.Application(middlewares=[logging_middleware, auth])
    app["config"] = config

    app.router.add_get("/api/health", handle_health)
    app.router.add_get("/api/init-data", handle_init_data)

    return app
