import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resumate import __version__
from resumate.api.routes import applications, generation, jobs, process_job, profile, resumes
from resumate.db.session import init_db
from resumate.errors import ResuMateError, ValidationFailedError
from resumate.settings import get_settings
from resumate.utils.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

CORS_ORIGINS = settings.cors_origins


# -----------------------------
# FastAPI
# -----------------------------
app = FastAPI(title="ResuMate API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"]
    if CORS_ORIGINS.strip() == "*"
    else [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Resume-Id", "Content-Disposition"],
)


# -----------------------------
# Error handling
# -----------------------------
@app.exception_handler(ResuMateError)
def _handle_domain_error(request: Request, exc: ResuMateError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning(
            "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = ValidationFailedError.from_errors(exc.errors())
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, err.errors)
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


@app.exception_handler(Exception)
def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# -----------------------------
# Startup
# -----------------------------
@app.on_event("startup")
def _startup() -> None:
    logger.info("API Server starting: Initializing DB...")
    init_db()
    logger.info("API Server ready.")


# -----------------------------
# Routes
# -----------------------------
@app.get("/health")
def health():
    """Return API health metadata."""
    return {"status": "ok", "version": __version__}


app.include_router(profile.router)
app.include_router(jobs.router)
app.include_router(process_job.router)
app.include_router(applications.router)
app.include_router(generation.router)
app.include_router(resumes.router)


def main() -> None:
    uvicorn.run("resumate.api.server:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
