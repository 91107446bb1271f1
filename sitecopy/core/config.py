# sitecopy/core/config.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from .errors import register_exception_handlers
from .settings import settings

# rutas sin token (solo documentación; la seguridad real vive en las dependencias)
PUBLIC_PATHS = ("/content/value", "/health/")


def _cors(app: FastAPI) -> None:
    origins = settings.CORS_ORIGINS
    if not origins:
        return
    # credenciales y comodín no se combinan
    wildcard = "*" in origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )


def _bearer_openapi(app: FastAPI) -> None:
    """bearerAuth global en OpenAPI, anulado en la lectura pública y el health."""

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=settings.APP_NAME,
            version="1.0.0",
            description="Textos del sitio: versiones, publicación y lectura pública cacheada",
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})["bearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        schema["security"] = [{"bearerAuth": []}]
        # rutas públicas: sin requisito de token
        for path, operations in schema.get("paths", {}).items():
            if any(p in path for p in PUBLIC_PATHS):
                for op in operations.values():
                    if isinstance(op, dict):
                        op["security"] = []
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME)
    _cors(app)
    _bearer_openapi(app)
    register_exception_handlers(app)
    return app
