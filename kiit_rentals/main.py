import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import config
from .core.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    RentalsError,
    ValidationError,
)
from .core.initialise_db import initialize_db
from .routers import auth, products

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Most specific class first; NotFoundError also covers InvalidIdError
ERROR_STATUS_CODES = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(exc: RentalsError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; tokens are signed with the fallback secret")
    initialize_db()
    logger.info(f"Server ready on port {config.PORT}")
    yield


app = FastAPI(title="KIIT Rentals API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RentalsError)
async def rentals_error_handler(request: Request, exc: RentalsError):
    status_code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=error_body(exc.message), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        message = str(first.get("msg", message)).removeprefix("Value error, ")
        fields = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        if fields:
            message = f"{'.'.join(fields)}: {message}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body("Server Error"))


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


# Register routers
app.include_router(auth.router)
app.include_router(products.router)

# Serve a built frontend last so API routes always win
if config.FRONTEND_DIR and os.path.isdir(config.FRONTEND_DIR):
    app.mount("/", StaticFiles(directory=config.FRONTEND_DIR, html=True), name="frontend")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
