# app/routers/_responses.py - shared API response envelopes

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class DataEnvelope(BaseModel):
    data: Any


class ErrorEnvelope(BaseModel):
    error: str


class ClientSecretResponse(BaseModel):
    client_secret: str = Field(serialization_alias="clientSecret")


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def client_secret_response(client_secret: str) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=ClientSecretResponse(client_secret=client_secret).model_dump(by_alias=True),
    )
