from __future__ import annotations

from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from sitecopy.api.v1.router import api_router
from sitecopy.core.config import create_app
from sitecopy.core.logging import configure_logging
from sitecopy.core.settings import settings
from sitecopy.middleware.ratelimit import RateLimitMiddleware

configure_logging(settings.LOG_LEVEL)
app = create_app()

# el middleware consulta RATELIMIT_ENABLED en cada request
app.add_middleware(RateLimitMiddleware)
# detrás del router de Heroku: IP real del cliente para el rate limit público
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.include_router(api_router, prefix=settings.API_V1_STR)
