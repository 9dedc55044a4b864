"""FastAPI endpoint for programmatic access to the assistant pipeline."""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .config import RelayConfig
from .errors import NoAssistantReply, PollTimeout, RelayError, RemoteAPIError
from .models import AssistantResponse, Message
from .pipeline import AssistantPipeline

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    RemoteAPIError: 502,
    PollTimeout: 504,
    NoAssistantReply: 502,
}


def _status_for(exc: RelayError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(
    pipeline: Optional[AssistantPipeline] = None,
    config: Optional[RelayConfig] = None,
) -> FastAPI:
    """Create the FastAPI application around one shared pipeline."""
    if pipeline is None:
        pipeline = AssistantPipeline(config or RelayConfig.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Assistant relay shutting down, closing API client")
        app.state.pipeline.close()

    app = FastAPI(
        title="Assistant Relay",
        description="Relays conversations to a hosted assistant and returns its reply",
        version=pipeline.config.version,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request body: {exc.errors()}")
        return Response(status_code=400)

    @app.post("/api/assistant")
    def call_assistant(messages: List[Message]):
        """Send the messages to the assistant and return its reply."""
        if not messages:
            return Response(status_code=400)

        try:
            response = app.state.pipeline.run(messages)
        except RelayError as e:
            logger.error(f"Assistant request failed: {e}", exc_info=True)
            return JSONResponse(
                status_code=_status_for(e),
                content=AssistantResponse.from_error(e).to_dict(),
            )

        return JSONResponse(content=response.to_dict())

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
