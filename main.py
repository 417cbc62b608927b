from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from core.config import settings
from core.database import Base, engine
from core.exceptions import SnagTrackerError, StorageError, error_response
from core.logging_config import logger
from core.middleware import RequestLoggingMiddleware
from routers import auth_router, project_router, snag_router
from models import user, project, snag  # noqa: F401  register tables on Base.metadata


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Snag Tracker API ({settings.ENVIRONMENT})")
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    logger.info("Snag Tracker API stopped")


app = FastAPI(title="Snag Tracker API", lifespan=lifespan, redirect_slashes=False)

# Respect X-Forwarded-Proto/Host when behind a proxy (Docker/nginx/etc.)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)

app.include_router(auth_router.router)
app.include_router(project_router.router)
app.include_router(snag_router.router)


@app.exception_handler(SnagTrackerError)
async def snag_tracker_error_handler(request: Request, exc: SnagTrackerError):
    if isinstance(exc, StorageError):
        # Already logged with traceback where it was raised
        return JSONResponse(status_code=exc.status_code, content={"error": "Server error", "code": exc.code})
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        fields.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "code": "VALIDATION_ERROR", "details": {"fields": fields}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {type(exc).__name__}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error", "code": "INTERNAL_ERROR"})


@app.get("/")
def root():
    return {"message": "Snag Tracker API ready"}


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
