# sitecopy/middleware/ratelimit.py
from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from sitecopy.core.settings import settings

WindowState = Tuple[int, int]  # (window_epoch_sec, count)

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Límite por minuto con ventanas fijas, en memoria de proceso.
    - Lectura pública GET {API}/content/value: key por IP.
    - Escrituras admin bajo {API}/content: key por token (Authorization) y fallback IP.
    """

    def __init__(self, app, prefix: Optional[str] = None):
        super().__init__(app)
        self._prefix = f"{prefix if prefix is not None else settings.API_V1_STR}/content"
        self._store: Dict[str, WindowState] = {}
        self._lock = threading.Lock()

    def _hit(self, key: str, limit: int) -> bool:
        now = int(time.time())
        window = now - (now % 60)
        with self._lock:
            w, c = self._store.get(key, (window, 0))
            if w != window:
                w, c = window, 0
            c += 1
            self._store[key] = (w, c)
            return c <= limit

    def _classify(self, request: Request) -> Tuple[Optional[str], Optional[int]]:
        path = request.url.path or ""
        method = request.method.upper()
        client_ip = request.client.host if request.client else "unknown"

        if not path.startswith(self._prefix):
            return None, None
        if method == "GET" and path == f"{self._prefix}/value":
            return f"lookup:{client_ip}", settings.RATELIMIT_LOOKUP_PER_MIN
        if method in WRITE_METHODS:
            who = request.headers.get("Authorization") or f"ip:{client_ip}"
            return f"write:{who}", settings.RATELIMIT_WRITE_PER_MIN
        return None, None

    async def dispatch(self, request: Request, call_next):
        if not settings.RATELIMIT_ENABLED:
            return await call_next(request)

        key, limit = self._classify(request)
        if key is not None and limit and limit > 0:
            if not self._hit(key, limit):
                return JSONResponse(
                    {"code": "RATE_LIMITED", "message": "Rate limit exceeded", "limit_per_min": limit},
                    status_code=429,
                    headers={"Retry-After": "60"},
                )

        return await call_next(request)
