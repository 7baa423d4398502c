from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from ..core.logging import setup_logging
from ..core.config import settings
from ..core.errors import BackendUnavailable, GenerativeBackendError, InvalidLlmJson, OcrError
from .routers import health, invoice

logger = setup_logging()
app = FastAPI(title="Invoice OCR Service")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(OcrError)
async def ocr_exception_handler(request: Request, exc: OcrError):
    logger.error("Failed to analyze invoice", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to analyze invoice"},
    )


@app.exception_handler(InvalidLlmJson)
async def invalid_llm_json_handler(request: Request, exc: InvalidLlmJson):
    # Only reached when the generative backend produced the payload
    logger.error("Generative parser output rejected", error=exc.message, detail=exc.detail)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": exc.message, "error": "InvalidLlmJson", "reason": exc.detail},
    )


@app.exception_handler(GenerativeBackendError)
async def generative_backend_handler(request: Request, exc: GenerativeBackendError):
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


@app.exception_handler(BackendUnavailable)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    logger.warning("Requested backend unavailable", backend=exc.backend, reason=exc.reason)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


# Configure CORS to allow frontend access
# Example: CORS_ORIGINS=http://localhost:3000,https://your-frontend.com
allowed_origins = [origin.strip() for origin in settings.cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(invoice.analyze_router)
app.include_router(invoice.router)
