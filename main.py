"""
ClientIQ - CRM front-end service
Holds the logged-in profile, talks to the CRM REST API and serves the
view models (dashboard, client and order lists, order details) to the browser
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import uvicorn
from contextlib import asynccontextmanager
import logging
from datetime import datetime

# Import our modules
from app.config import CORS_ALLOW_ORIGINS, CRM_API_BASE_URL, RATE_LIMIT_ENABLED
from app.routers import auth, clients, dashboard, order_items, orders, products
from app.services.crm_api import CrmApiClient
from app.services.session_store import ProfileStore, SessionContext
from app.utils.error_handler import BoundaryError, boundary_error_handler, http_error_handler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    logger.info("Starting ClientIQ front-end service...")
    session = SessionContext(ProfileStore())
    session.initialize()
    app.state.session = session
    app.state.api_client = CrmApiClient()
    logger.info(f"Using CRM API at {CRM_API_BASE_URL}")

    yield

    # Shutdown
    logger.info("Shutting down ClientIQ front-end service...")
    await app.state.api_client.aclose()

# Create FastAPI app
app = FastAPI(
    title="ClientIQ CRM",
    description="Front-end service for managing clients, orders and order items",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(BoundaryError, boundary_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/v1/session", tags=["session"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])
app.include_router(clients.router, prefix="/api/v1/clients", tags=["clients"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["orders"])
app.include_router(order_items.router, prefix="/api/v1/order-items", tags=["order items"])
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])

@app.get("/")
@limiter.limit("10/minute")
async def root(request: Request):
    """Root endpoint with API information - publicly accessible"""
    return {
        "message": "ClientIQ CRM",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "timestamp": datetime.utcnow().isoformat()
    }

@app.get("/health")
@limiter.limit("30/minute")
async def health_check(request: Request):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat()
    }

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Last-resort handler; logs with an error id the user can report"""
    import uuid
    import traceback

    # Generate unique error ID for tracking
    error_id = str(uuid.uuid4())

    # Log the error with full context
    logger.error(
        f"Unhandled exception {error_id}: {type(exc).__name__} in {request.method} {request.url.path}",
        extra={
            "error_id": error_id,
            "endpoint": str(request.url.path),
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            "stack_trace": traceback.format_exc()
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred. Please try again later.",
                "error_id": error_id,
                "timestamp": datetime.utcnow().isoformat()
            }
        }
    )

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
