"""
gkit REST Server

FastAPI wrapper over the command registry.

Endpoints:
- POST /api/<command-name-with-hyphens>: run a registry command
- GET /health: Health check

Request bodies are JSON objects of named string arguments. Validation
failures answer 400 before anything is spawned; once the dispatcher ran,
the answer is 200 with {"success", "output", "error"} whatever its exit code.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..core.registry import CommandSpec
from ..core.service import CommandService
from ..common.config import configure_logging, load_config
from ..common.errors import GkitError, ParameterError

logger = logging.getLogger("gkit.api.server")


def route_path(name: str) -> str:
    """create_branch -> /api/create-branch"""
    return "/api/" + name.replace("_", "-")


def _bad_request(error: str, parameter: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if parameter is not None:
        body["parameter"] = parameter
    return JSONResponse(status_code=400, content=body)


def _make_endpoint(service: CommandService, spec: CommandSpec):
    async def endpoint(request: Request) -> JSONResponse:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw.strip() else {}
        except ValueError:
            return _bad_request("Request body must be valid JSON")
        if not isinstance(payload, dict):
            return _bad_request("Request body must be a JSON object")

        try:
            invocation = service.build_request(spec.name, payload)
            service.prepare(invocation)
        except ParameterError as e:
            return _bad_request(str(e), e.parameter)
        except GkitError as e:
            return _bad_request(str(e))

        result = await run_in_threadpool(service.execute, invocation)
        return JSONResponse(status_code=200, content=result.to_dict())

    endpoint.__name__ = f"api_{spec.name}"
    endpoint.__doc__ = spec.description
    return endpoint


def create_app(service: Optional[CommandService] = None) -> FastAPI:
    """
    Build the REST app.

    Args:
        service: Command service; built from the loaded config when omitted
    """
    if service is None:
        service = CommandService.from_config(load_config())

    app = FastAPI(
        title="gkit API",
        description="REST wrapper over the gkit git/GitHub/Slack commands",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    for spec in service.registry:
        app.add_api_route(
            route_path(spec.name),
            _make_endpoint(service, spec),
            methods=["POST"],
            summary=spec.description,
        )

    app.state.service = service
    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the gkit REST server"""
    import uvicorn

    load_dotenv()
    config = load_config()
    configure_logging(config.server.log_level)

    app = create_app(CommandService.from_config(config))
    logger.info("Starting gkit API on %s:%d", config.server.host, config.server.port)
    for spec in app.state.service.registry:
        logger.info("  POST %s", route_path(spec.name))

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        reload=False,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
