from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from dotenv import load_dotenv
import time
from fastapi import Request

# Load environment variables
load_dotenv()

# Import routers
from .routes.payment_routes import router as payment_router
from .routes.service_routes import router as service_router
from .config.settings import settings

# Create logs directory if it doesn't exist
log_dir = Path("logs")
log_dir.mkdir(exist_ok=True)

# Configure logging with file handler
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

# Create formatters
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# File handler for app.log
file_handler = RotatingFileHandler(
    'logs/app.log',
    maxBytes=10485760,  # 10MB
    backupCount=5
)
file_handler.setLevel(logging.DEBUG)
file_handler.setFormatter(formatter)

# Console handler
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.DEBUG)
console_handler.setFormatter(formatter)

# Attach to the package logger so routes and services share the handlers
backend_logger = logging.getLogger("backend")
backend_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
if not backend_logger.handlers:
    backend_logger.addHandler(file_handler)
    backend_logger.addHandler(console_handler)

# Initialize FastAPI app
app = FastAPI(
    debug=settings.DEBUG,
    title="Dental Clinic Payments API",
    description="Creates PayU Bolt and Cashfree payment orders for the clinic checkout",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    # Log the incoming request; headers carry no secrets on these routes
    logger.info(f"Incoming request: {request.method} {request.url}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Request error: {str(e)}")
        raise

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log the response
    logger.info(f"Completed request: {request.method} {request.url} - Status: {response.status_code} - Time: {process_time:.4f}s")

    return response

# Include routers
try:
    app.include_router(payment_router, prefix="/api", tags=["payments"])
    app.include_router(service_router, prefix="/api", tags=["services"])
    logger.info("All routers included successfully")
except Exception as e:
    logger.error(f"Failed to include routers: {str(e)}")
    raise

@app.get("/api")
async def root():
    """Service description"""
    logger.info("Root endpoint called")
    return {
        "message": "Dental Clinic Payments API is running",
        "version": "1.0.0",
        "payment_gateway": settings.PAYMENT_GATEWAY,
        "endpoints": {
            "create_payment_order": "POST /api/create-payment-order",
            "create_payu_order": "POST /api/payu/create-payment-order",
            "create_cashfree_order": "POST /api/cashfree/create-payment-order",
            "services": "GET /api/services",
            "service": "GET /api/services/{service_id}"
        }
    }

# Add health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    logger.info("Health check endpoint called")
    return {"status": "healthy", "service": "dental-payments"}

@app.get("/api/health")
async def api_health_check():
    """Health check endpoint"""
    logger.info("Health check endpoint called")
    return {"status": "healthy", "service": "dental-payments"}

# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"message": "Internal server error", "error": str(exc)})

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Dental Clinic Payments API server")
    uvicorn.run(
        "backend.app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG
    )
