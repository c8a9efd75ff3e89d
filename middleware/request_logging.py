from fastapi import Request
from starlette.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import settings
from utils.logger import DatabaseLogger
import time
import uuid
import logging

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Request size limit (1MB); order payloads are small JSON documents
MAX_BODY_BYTES = 1024 * 1024

def client_ip(request: Request) -> str:
    """Client IP, honouring X-Forwarded-For from a proxy"""
    ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not ip and request.client:
        ip = request.client.host
    return ip or "unknown"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Per-request bookkeeping:
    - X-Request-ID assignment
    - request size limit
    - timing and api_logs record
    - security headers
    """
    
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
            return JSONResponse(
                status_code=413,
                content={"detail": "Request body too large"},
                headers={"X-Request-ID": request_id}
            )
        
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)
        
        response.headers["X-Request-ID"] = request_id
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms)")
        if settings.api_request_logging and request.url.path.startswith("/api/"):
            DatabaseLogger.log_api_request(
                method=request.method,
                endpoint=request.url.path,
                status_code=response.status_code,
                request_id=request_id,
                ip_address=client_ip(request),
                duration_ms=duration_ms
            )
        
        return response
