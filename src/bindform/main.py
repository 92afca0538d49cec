# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the main unit so this responsibility stays isolated, testable, and easy to evolve.

Demo application for bindform: a greeting API that binds the same ``Human``
shape from JSON, XML, URL-encoded bodies or the query string.
"""

from __future__ import annotations

import argparse
import os
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from bindform.api.extractors import BindForm, TryBindForm, install_bind_handlers
from bindform.api.http_responses import error_text
from bindform.core.config import BindConfig, load_bind_config
from bindform.models.result import BindResult


class Human(BaseModel):
    name: str
    age: int


def _greeting(human: Human) -> str:
    return f"Hello {human.age} year old named {human.name}!"


def build_router(config: BindConfig) -> APIRouter:
    router = APIRouter(tags=["Greet"])
    bind_human = BindForm(Human, config)
    try_bind_human = TryBindForm(Human, config)

    @router.api_route(
        "/greet", methods=["GET", "POST"], response_class=PlainTextResponse
    )
    async def greet_human(human: Human = Depends(bind_human)) -> str:
        """Greet Human."""
        return _greeting(human)

    @router.api_route(
        "/try_greet", methods=["GET", "POST"], response_class=PlainTextResponse
    )
    async def try_greet_human(result: BindResult = Depends(try_bind_human)):
        """Try Greet Human."""
        if result.error is not None:
            return error_text(f"Error parsing form: {result.error}", status_code=400)
        return _greeting(result.value)

    return router


def create_app(config: Optional[BindConfig] = None) -> FastAPI:
    """Create the FastAPI app.

    Uvicorn's reload mode requires an import string; using an app factory keeps
    route registration consistent across reload subprocesses.
    """
    if config is None:
        config = load_bind_config(os.getenv("BINDFORM_CONFIG", "config/bindform.json"))

    app = FastAPI(title="bindform")
    app.state.bind_config = config

    app.include_router(build_router(config))
    app.add_api_route("/health", endpoint=lambda: {"status": "ok"}, methods=["GET"])

    # --------------- rejection handler ---------------
    install_bind_handlers(app)

    return app


def build_arg_parser() -> argparse.ArgumentParser:
    """Build Arg Parser."""
    parser = argparse.ArgumentParser(
        prog="bindform",
        description="Run the bindform demo FastAPI server",
    )
    parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development only)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for the server (default: info)",
    )
    parser.add_argument(
        "--codecs",
        default=None,
        help="Comma separated codecs to enable: json,urlencoded,xml",
    )
    parser.add_argument(
        "--body-limit",
        default=None,
        help="Maximum body size in bytes, or 'none' (default: 2 MiB)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint to run the demo server via a normal Python invocation.

    Examples:
      python -m bindform.main --help
      python -m bindform.main --port 3000 --codecs json,xml
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    # the app factory reads these, including in reload subprocesses
    if args.codecs is not None:
        os.environ["BINDFORM_CODECS"] = args.codecs
    if args.body_limit is not None:
        os.environ["BINDFORM_BODY_LIMIT"] = args.body_limit

    # Import uvicorn lazily so that importing this module doesn't require it for tests/tools
    import uvicorn  # type: ignore

    if args.reload:
        app_target = "bindform.main:create_app"
    else:
        app_target = create_app()

    uvicorn.run(
        app_target,
        host=args.host,
        port=args.port,
        reload=bool(args.reload),
        log_level=args.log_level,
        factory=bool(args.reload),
    )


if __name__ == "__main__":
    main()
