import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.error_responses import ErrorCode, make_error, make_errors
from core.invariants import check_engine_contract, enforce_invariant, get_health_status
from core.structured_logging import RequestCorrelationMiddleware, configure_structured_logging, get_request_id
from core.time_cet import now_cet
from env_config import Config
from routers import periods_router

configure_structured_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Config.log_status()
    for error in check_engine_contract(now_cet()):
        enforce_invariant(False, error)
    logger.info(f"Period service ready (engine {Config.ENGINE_VERSION}, tz {Config.TIMEZONE})")
    yield


app = FastAPI(title="Prediction Periods API", version=Config.API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestCorrelationMiddleware)

app.include_router(periods_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """422 in the standard error envelope, one entry per rejected field."""
    errors = [
        {
            "code": ErrorCode.INVALID_PARAMETER,
            "message": error["msg"],
            "field": str(error["loc"][-1]) if error.get("loc") else None,
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content=make_errors(errors, request_id=get_request_id()))


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=make_error(
            code=ErrorCode.INTERNAL_ERROR,
            message="Internal server error",
            request_id=get_request_id(),
        ),
    )


@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Prediction Periods API",
        "version": Config.API_VERSION,
        "engine_version": Config.ENGINE_VERSION,
        "timezone": Config.TIMEZONE,
    }


@app.get("/health")
def health():
    degraded, errors = get_health_status()
    return {
        "status": "degraded" if degraded else "healthy",
        "errors": errors,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
