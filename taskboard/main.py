import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.config import CORS_ORIGINS, LOG_LEVEL, PORT
from taskboard.db.database import create_database_engine, init_database
from taskboard.errors import TaskboardError
from taskboard.routes import developer_routes, skill_routes, task_routes
from taskboard.services.llm_service import GeminiSkillIdentifier, SkillIdentifier

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_database(app.state.engine)
    logger.info(f"Database ready at {app.state.engine.url!r}")
    yield


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


def create_app(engine: Optional[Engine] = None, skill_identifier: Optional[SkillIdentifier] = None) -> FastAPI:
    app = FastAPI(title="Taskboard", lifespan=lifespan)
    app.state.engine = engine if engine is not None else create_database_engine()
    app.state.skill_identifier = skill_identifier if skill_identifier is not None else GeminiSkillIdentifier()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routers
    app.include_router(task_routes.router, prefix=API_PREFIX)
    app.include_router(developer_routes.router, prefix=API_PREFIX)
    app.include_router(skill_routes.router, prefix=API_PREFIX)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=PORT, reload=True)
