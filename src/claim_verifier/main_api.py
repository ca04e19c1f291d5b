"""
HTTP entry points: POST /verify-claim and POST /transcribe.
Failures are answered as {"error": "..."} with a non-2xx status.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .errors import (
    ClaimVerifierError,
    ConfigurationError,
    MappingError,
    RetrievalError,
    SynthesisError,
    TranscriptionError,
)
from .llm.prompts import DEFAULT_LANGUAGE, load_profiles
from .log import setup_logging, get_logger
from .pipeline.run import ClaimVerifier
from .schemas.outputs import TranscriptionResult, VerificationResult
from .schemas.requests import ClaimRequest
from .speech.transcribe import Transcriber

setup_logging()
logger = get_logger("api")

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    load_profiles()
    if not settings.LLM_API_KEY:
        logger.warning("LLM_API_KEY not configured, /verify-claim will refuse requests")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not configured, /transcribe will refuse requests")
    yield

app = FastAPI(title="Claim Verifier", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)

async def get_verifier() -> AsyncIterator[ClaimVerifier]:
    verifier = ClaimVerifier.from_settings(get_settings())
    try:
        yield verifier
    finally:
        await verifier.aclose()

async def get_transcriber() -> AsyncIterator[Transcriber]:
    transcriber = Transcriber.from_settings(get_settings())
    try:
        yield transcriber
    finally:
        await transcriber.aclose()

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error: {exc}")
    return _error(500, str(exc))

@app.exception_handler(RetrievalError)
@app.exception_handler(SynthesisError)
@app.exception_handler(MappingError)
@app.exception_handler(TranscriptionError)
async def upstream_error_handler(request: Request, exc: ClaimVerifierError):
    logger.error(f"Error in {request.url.path}: {exc}")
    return _error(502, str(exc))

@app.exception_handler(ClaimVerifierError)
async def claim_verifier_error_handler(request: Request, exc: ClaimVerifierError):
    logger.error(f"Error in {request.url.path}: {exc}")
    return _error(500, str(exc))

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error in {request.url.path}: {exc}")
    return _error(500, "Internal server error")

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error(400, message)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))

@app.get("/")
async def root():
    return {"message": "Claim Verifier API is running. POST /verify-claim or /transcribe."}

@app.post("/verify-claim", response_model=VerificationResult)
async def verify_claim(body: ClaimRequest, verifier: ClaimVerifier = Depends(get_verifier)):
    return await verifier.verify(body.claim, body.language)

@app.post("/transcribe", response_model=TranscriptionResult)
async def transcribe(
    audio: Optional[UploadFile] = File(None),
    language: str = Form(DEFAULT_LANGUAGE.value, pattern=r"^[a-z]{2,3}$"),
    transcriber: Transcriber = Depends(get_transcriber),
):
    if audio is None:
        raise StarletteHTTPException(status_code=400, detail="No audio file provided")

    data = await audio.read()
    if not data:
        raise StarletteHTTPException(status_code=400, detail="No audio file provided")

    return await transcriber.transcribe(
        data,
        language,
        filename=audio.filename or "recording.webm",
        content_type=audio.content_type,
    )
