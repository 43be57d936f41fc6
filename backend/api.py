"""FastAPI application: thin handlers over KeyStore and the key classifier."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config import create_key_store, get_config
from errors import KeyStoreError
from key_store import KeyStore
from mappers import record_to_dto, records_to_dtos, update_request_to_domain
from models import (
    ApiKeyResponse, CreateKeyRequest, DeleteKeyResponse, ErrorResponse,
    HealthResponse, UpdateKeyRequest, ValidateKeyRequest, ValidateKeyResponse,
)
from use_cases.validate_key import ValidateKeyUseCase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

VALID_KEY_MESSAGE = "Valid API Key, /protected can be accessed"


def get_key_store(request: Request) -> KeyStore:
    return request.app.state.key_store


@router.get("/keys", response_model=list[ApiKeyResponse])
def list_keys(key_store: KeyStore = Depends(get_key_store)):
    return records_to_dtos(key_store.list_all())


@router.post("/keys", response_model=ApiKeyResponse, status_code=201)
def create_key(body: CreateKeyRequest, key_store: KeyStore = Depends(get_key_store)):
    record = key_store.create(body.name, body.value)
    return record_to_dto(record)


@router.get("/keys/{key_id}", response_model=ApiKeyResponse)
def get_key(key_id: str, key_store: KeyStore = Depends(get_key_store)):
    record = key_store.get_by_id(key_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Not found")
    return record_to_dto(record)


@router.put("/keys/{key_id}", response_model=ApiKeyResponse)
def update_key(
    key_id: str,
    body: UpdateKeyRequest,
    key_store: KeyStore = Depends(get_key_store),
):
    record = key_store.update(key_id, update_request_to_domain(body))
    if record is None:
        raise HTTPException(status_code=404, detail="Not found")
    return record_to_dto(record)


@router.delete("/keys/{key_id}", response_model=DeleteKeyResponse)
def delete_key(key_id: str, key_store: KeyStore = Depends(get_key_store)):
    if not key_store.delete(key_id):
        raise HTTPException(status_code=404, detail="Not found")
    return DeleteKeyResponse()


@router.post("/validate", response_model=ValidateKeyResponse, response_model_exclude_none=True)
def validate_key(body: ValidateKeyRequest, key_store: KeyStore = Depends(get_key_store)):
    result = ValidateKeyUseCase(key_store).execute(body.api_key)
    if not result.valid:
        return JSONResponse(status_code=401, content={"message": "Invalid API Key", "status": "error"})
    return ValidateKeyResponse(status="success", message=VALID_KEY_MESSAGE, key_name=result.key_name)


async def _key_store_error_handler(request: Request, exc: KeyStoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    body = ErrorResponse(message=exc.message, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"message": "Invalid request format"})


def create_app(key_store: Optional[KeyStore] = None) -> FastAPI:
    """Build the app. Without an explicit key_store one is made from Config."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.key_store.close()

    app = FastAPI(title="Keyring Dashboard API", lifespan=lifespan)
    app.state.key_store = key_store or create_key_store(get_config())
    app.add_exception_handler(KeyStoreError, _key_store_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(router)

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request):
        return HealthResponse(backend=request.app.state.key_store.backend_name())

    return app
