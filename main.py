from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

# Internal imports
from config import config
from data.database import create_tables
from services.errors import ABTestError, DanglingReferenceError
from services.registry import TestRegistry
from api.ab_test_routes import tests_router
from api.analytics_routes import analytics_router
from api.depends import ORIGIN, REGISTRY, templates
from api.embed_routes import embed_router
from api.image_routes import images_router

import contextlib
import logging
import middleware

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles startup and shutdown events for the application.
    Code before 'yield' runs on startup.
    Code after 'yield' runs on shutdown.
    """
    logger.info("Application starting up with %s", config)
    create_tables()
    logger.info("Database tables initialized successfully.")

    yield

    logger.info("Application shutting down.")

# --- FastAPI App Initialization ---
app = FastAPI(
    lifespan=lifespan,
    title="A/B Testing Service",
    version="1.0.0",
    description="Create two-variation tests, serve a random variation to embedding sites, count views."
)

# Embeds are loaded from arbitrary third-party sites
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(middleware.RequestIDMiddleware)

app.include_router(tests_router)
app.include_router(embed_router)
app.include_router(analytics_router)
app.include_router(images_router)


# --- Error Handlers ---

@app.exception_handler(ABTestError)
async def abtest_error_handler(request: Request, exc: ABTestError):
    if isinstance(exc, DanglingReferenceError):
        logger.error("%s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.info("%s %s failed with %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported like any other bad input: 400 with an {error} body."""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body') or 'body'}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request"
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(content={"error": message}, status_code=status.HTTP_400_BAD_REQUEST)


# --- API Endpoints ---

@app.get("/health")
def health_check():
    return JSONResponse(content={"status": "healthy"}, status_code=200)


@app.get("/", response_class=HTMLResponse)
def index_route(request: Request, origin: str = ORIGIN, registry: TestRegistry = REGISTRY):
    """List existing tests with a form to create a new one."""
    return templates.TemplateResponse(request, "index.html", {"tests": registry.list_tests(origin)})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
