"""
Per-IP rate limiting for the public booking endpoints.

Fixed windows are counted in process memory and pushed to Redis every few
seconds, so several workers converge on a shared count without a Redis round
trip per request. When Redis is unreachable the counters stay local.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

REDIS_SYNC_SECONDS = 10
SWEEP_SECONDS = 60

# key -> {"count": int, "window_ends": int, "synced_at": int}
_windows: dict[str, dict] = {}
_windows_lock = Lock()
_last_sweep = 0

_redis: Optional[redis.Redis] = None
_redis_down = False


def get_redis_client() -> Optional[redis.Redis]:
    """Shared Redis connection, or None once a connection attempt has failed"""
    global _redis, _redis_down
    if _redis is not None or _redis_down:
        return _redis

    common = {"decode_responses": True, "socket_connect_timeout": 5, "socket_timeout": 5}
    url = os.getenv("REDIS_URL")
    try:
        if url:
            client = redis.from_url(url, **common)
            target = url.rsplit("@", 1)[-1]
        else:
            host = os.getenv("REDIS_HOST", "localhost")
            port = int(os.getenv("REDIS_PORT", "6379"))
            client = redis.Redis(
                host=host,
                port=port,
                password=os.getenv("REDIS_PASSWORD") or None,
                db=int(os.getenv("REDIS_DB", "0")),
                ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
                **common,
            )
            target = f"{host}:{port}"
        client.ping()
    except (redis.RedisError, ValueError) as e:
        _redis_down = True
        logger.error(f"❌ Redis unavailable for rate limiting: {e}")
        logger.warning("⚠️ Rate limits are now counted per process")
        return None

    _redis = client
    logger.info(f"✅ Rate limiter connected to Redis at {target}")
    return _redis


def _sweep(now: int):
    """Drop finished windows at most once per SWEEP_SECONDS"""
    global _last_sweep
    if now - _last_sweep < SWEEP_SECONDS:
        return
    with _windows_lock:
        finished = [key for key, window in _windows.items() if window["window_ends"] <= now]
        for key in finished:
            del _windows[key]
    _last_sweep = now
    if finished:
        logger.debug(f"🧹 Dropped {len(finished)} finished rate limit windows")


def _window_from_redis(key: str, window_seconds: int, client: Optional[redis.Redis], now: int) -> dict:
    if client is not None:
        try:
            stored, ttl = client.get(key), client.ttl(key)
            if stored and ttl > 0:
                return {"count": int(stored), "window_ends": now + ttl, "synced_at": now}
        except redis.RedisError as e:
            logger.warning(f"⚠️ Could not read {key} from Redis: {e}")
    return {"count": 0, "window_ends": now + window_seconds, "synced_at": now}


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis]
) -> tuple[bool, int, int]:
    """
    Count one request against key.

    Returns (allowed, requests counted in the window, seconds until it resets).
    """
    now = int(time.time())
    _sweep(now)

    with _windows_lock:
        window = _windows.get(key)
        if window is None:
            window = _windows[key] = _window_from_redis(key, window_seconds, client, now)
        elif window["window_ends"] <= now:
            window.update(count=0, window_ends=now + window_seconds, synced_at=0)

        allowed = window["count"] < limit
        if allowed:
            window["count"] += 1

        if client is not None and now - window["synced_at"] >= REDIS_SYNC_SECONDS:
            try:
                client.set(key, window["count"], ex=window_seconds)
                window["synced_at"] = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Could not push {key} to Redis: {e}")

        return allowed, window["count"], max(0, window["window_ends"] - now)


def client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def rate_limit_dependency(request: Request, limit: int, window_seconds: int, key_prefix: str):
    if not RATE_LIMIT_ENABLED:
        return

    key = f"{key_prefix}:{client_ip(request)}"
    try:
        allowed, count, retry_after = check_rate_limit(key, limit, window_seconds, get_redis_client())
    except Exception as e:
        # Fail closed
        logger.error(f"❌ Rate limiter failed for {key}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Too busy right now, please try again shortly",
        ) from e

    if not allowed:
        logger.warning(f"🚫 {key} over limit ({count}/{limit} in {window_seconds}s)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "message": f"Too many requests. Try again in {retry_after} seconds.",
                "retry_after": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )

    request.state.rate_limit_remaining = limit - count


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Build a FastAPI dependency allowing `limit` requests per IP per window.

        booking_rate_limit = create_rate_limiter(10, 600, "public_booking")

        @router.post("/{owner_public_id}")
        async def book(..., _: None = Depends(booking_rate_limit)): ...
    """

    async def rate_limiter(request: Request):
        await rate_limit_dependency(request, limit, window_seconds, key_prefix)

    return rate_limiter
