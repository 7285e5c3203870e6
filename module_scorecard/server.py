"""
HTTP endpoint exposing the scorecard pipeline.

POST /process-url/ with {"url": "..."} returns the serialized scorecard.
"""

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from module_scorecard.config import ScorecardConfig, load_config
from module_scorecard.core import evaluate_module_async
from module_scorecard.errors import InvalidURLError, ScorecardError
from module_scorecard.http_client import close_async_http_client
from module_scorecard.resolvers import is_valid_url

logger = logging.getLogger(__name__)

Evaluator = Callable[[str], Awaitable[str]]

router = APIRouter(prefix="/process-url")


class ProcessURLRequest(BaseModel):
    url: str | None = None


def get_evaluator(request: Request) -> Evaluator:
    config: ScorecardConfig = request.app.state.config

    async def _evaluate(url: str) -> str:
        return await evaluate_module_async(url, config=config)

    return _evaluate


@router.post("")
@router.post("/")
async def process_url(
    body: ProcessURLRequest, evaluate: Evaluator = Depends(get_evaluator)
) -> Response:
    if not is_valid_url(body.url):
        return PlainTextResponse("Invalid URL", status_code=400)

    try:
        result = await evaluate(body.url)
    except InvalidURLError:
        return PlainTextResponse("Invalid URL", status_code=400)
    except ScorecardError as e:
        logger.error("Could not resolve %s: %s", body.url, e)
        return PlainTextResponse("Upstream unavailable", status_code=502)

    return Response(content=result, media_type="application/json")


async def _invalid_body(_request: Request, exc: RequestValidationError) -> Response:
    # Bodies without a string url never reach the handler
    logger.debug("Rejected request body: %s", exc.errors())
    return PlainTextResponse("Invalid URL", status_code=400)


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    yield
    await close_async_http_client()


def create_app(config: ScorecardConfig | None = None) -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="Module Scorecard API",
        description="Trust scorecards for npm packages and GitHub repositories",
        lifespan=_lifespan,
    )
    app.state.config = config or load_config()
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.include_router(router)
    return app
