from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from config import settings
import database
from database import Base, verify_db_connection
from routers import products, transactions, dashboard, ledger, remaining, logs
from middleware.request_logging import RequestLoggingMiddleware
from utils.logger import DatabaseLogger
import models  # noqa: F401 - registers tables on Base.metadata
import traceback
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Orders, cash transactions, ledger and outstanding balances for a print shop",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to prevent information leakage"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    DatabaseLogger.log_error(
        error_type=type(exc).__name__,
        error_message=str(exc),
        stack_trace=traceback.format_exc(),
        endpoint=request.url.path
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred. Please try again later."}
    )

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)

app.include_router(products.router)
app.include_router(transactions.router)
app.include_router(dashboard.router)
app.include_router(ledger.router)
app.include_router(remaining.router)
app.include_router(logs.router)

@app.on_event("startup")
async def startup_event():
    """Create tables on startup"""
    if database.engine is None:
        logger.error("DATABASE_URL not configured - database features disabled")
        return

    try:
        Base.metadata.create_all(bind=database.engine)
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Startup error: {e}")

@app.get("/")
def root():
    return {
        "message": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health")
def health_check():
    """Health check endpoint - reports database reachability"""
    db_status = "connected" if verify_db_connection() else "not connected"
    return {
        "status": "healthy",
        "database": db_status
    }
