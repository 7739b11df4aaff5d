'''

'''
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .services.http_client import create_http_client, dispose_http_client
from .services.assignment_workflows import create_workflow_registry, dispose_workflow_registry
from .common.logger import log
from .common.config import settings
from .common.exceptions import (
    ChargeValidationError,
    LoadFailureError,
    NoStudentsSelectedError,
    SubmissionFailureError,
    UnauthorizedRoleError,
    WorkflowStateError,
    RequestInProgressError
)
from .api import fees, fee_assignments, timetable

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    # --- On App Startup ---
    log.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    create_http_client()
    create_workflow_registry()

    yield # --- Application is now running ---

    # --- On App Shutdown ---
    log.info("Application lifespan shutdown...")
    dispose_workflow_registry()
    await dispose_http_client()


# ---- CREATING THE APP ----
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# --- Add CORS Middleware ---
origins = [
    # Expo web dev server
    "http://localhost:8081",
    "http://localhost:19006",
    "http://localhost",
]

# Extend with environment-specific origins
origins.extend(settings.BACKEND_CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],)
# --- End of CORS Middleware ---

# --- Domain errors -> HTTP ---
_STATUS_BY_ERROR = {
    ChargeValidationError: status.HTTP_400_BAD_REQUEST,
    NoStudentsSelectedError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedRoleError: status.HTTP_403_FORBIDDEN,
    WorkflowStateError: status.HTTP_409_CONFLICT,
    RequestInProgressError: status.HTTP_409_CONFLICT,
    LoadFailureError: status.HTTP_502_BAD_GATEWAY,
    SubmissionFailureError: status.HTTP_502_BAD_GATEWAY,
}

async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = _STATUS_BY_ERROR[type(exc)]
    log.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

for error_class in _STATUS_BY_ERROR:
    app.add_exception_handler(error_class, domain_error_handler)

@app.get("/")
async def health_check():
    return {"status": "ok", "message": f"{settings.APP_NAME} is running"}

app.include_router(fees.router)
app.include_router(fee_assignments.router)
app.include_router(timetable.router)
