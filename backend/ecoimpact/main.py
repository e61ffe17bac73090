import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecoimpact.core.config import settings
from ecoimpact.core.errors import InvalidProductInput
from ecoimpact.core.logging_config import configure_logging
from ecoimpact.api.v1.routes.health import router as health_router
from ecoimpact.api.v1.routes.analyze import router as analyze_router
from ecoimpact.api.v1.routes.history import router as history_router

logger = logging.getLogger("ecoimpact")


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)

    # Allow local web apps to call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        req_id = str(uuid.uuid4())[:8]
        logger.info("[%s] START %s %s", req_id, request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("[%s] UNHANDLED ERROR", req_id)
            raise
        logger.info("[%s] COMPLETE %s", req_id, response.status_code)
        return response

    @app.exception_handler(InvalidProductInput)
    async def invalid_input_handler(request: Request, exc: InvalidProductInput):
        logger.info("Rejected input on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(analyze_router, prefix="/api/v1")
    app.include_router(history_router, prefix="/api/v1")

    return app


app = create_app()
