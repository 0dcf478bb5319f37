from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from app.config.settings import settings
from app.core.exceptions import internal_error_response
import time
import logging

logger = logging.getLogger(__name__)

# Rutas que mueven stock o cambian el estado de una venta
STOCK_ROUTES = ("/api/open-sales", "/api/pay-sale", "/api/revert-sale", "/api/closed-sales", "/api/inventory")

def _log_level(request: Request, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if request.method != "GET" and request.url.path.startswith(STOCK_ROUTES):
        return logging.INFO
    return logging.DEBUG

def setup_middleware(app: FastAPI):
    """
    Configurar middleware de la aplicación.

    El orden importa: el último agregado es el más externo. CORS envuelve al
    log de requests para que también las respuestas 500 lleven sus headers.
    """

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = internal_error_response(request, exc)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        query = f"?{request.url.query}" if request.url.query else ""
        client = request.client.host if request.client else "-"
        logger.log(
            _log_level(request, response.status_code),
            f"{request.method} {request.url.path}{query} - "
            f"Status: {response.status_code} - "
            f"Client: {client} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    # CORS - solo el frontend configurado
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With"
        ],
        expose_headers=["X-Process-Time"],
        max_age=3600  # Cache preflight requests for 1 hour
    )
