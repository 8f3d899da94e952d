"""Cryptographically secure random numbers."""

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from fastapi import APIRouter

RANDOM_UPPER_BOUND = 10**18


def create_random_router() -> APIRouter:
    router = APIRouter(prefix="/random", tags=["random"])

    @router.get("")
    async def get_random() -> dict[str, Any]:
        value = secrets.randbelow(RANDOM_UPPER_BOUND)
        now = time.time()
        entropy = hashlib.sha256(f"{value}{int(now * 1000)}".encode()).hexdigest()
        return {"status": "ok", "random": value, "entropy": entropy, "timestamp": int(now)}

    return router
