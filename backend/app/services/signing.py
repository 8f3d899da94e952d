"""HMAC-SHA256 message signing and verification."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field


class SignRequest(BaseModel):
    message: str = Field(min_length=1)
    secret: str = Field(min_length=1)


class VerifyRequest(SignRequest):
    signature: str = Field(min_length=1)


def sign_message(message: str, secret: str) -> str:
    """Hex HMAC-SHA256 of message keyed by secret."""
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def verify_signature(message: str, signature: str, secret: str) -> bool:
    """Constant-time comparison against the expected signature."""
    return hmac.compare_digest(sign_message(message, secret), signature.strip().lower())


def create_signing_router() -> APIRouter:
    """Routes for POST /sign and POST /verify.

    Missing or empty fields are rejected by request validation with a 400.
    """
    router = APIRouter(tags=["signing"])

    @router.post("/sign")
    async def sign(body: SignRequest) -> dict[str, Any]:
        return {"status": "ok", "message": body.message, "signature": sign_message(body.message, body.secret)}

    @router.post("/verify")
    async def verify(body: VerifyRequest) -> dict[str, Any]:
        valid = verify_signature(body.message, body.signature, body.secret)
        return {"status": "ok", "valid": valid, "message": body.message}

    return router
