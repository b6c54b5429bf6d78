# app/main.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app import config
from app.database import close_client, ensure_indexes, get_client, get_db
from app.routers import auth, leaderboard, websocket
from app.storage.base import StorageError

# Configure logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Hare Krishna Game API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Routers
app.include_router(leaderboard.router)
app.include_router(auth.router)
app.include_router(websocket.router)


# Error Handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema violations are rejected before reaching the leaderboard."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# Application Lifecycle Events
@app.on_event("startup")
async def startup_event():
    """Actions to perform on application startup."""
    if config.STORAGE_BACKEND == "memory":
        logger.warning("Using the in-memory store; scores are lost on restart.")
        return
    try:
        await get_client().admin.command("ping")
        logger.info("Successfully connected to MongoDB!")
        await ensure_indexes(get_db())
        logger.info("Database indexes have been ensured.")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Actions to perform on application shutdown."""
    close_client()
    logger.info("MongoDB connection has been closed.")


# Root Endpoint
@app.get("/")
async def root():
    """Root endpoint to check if the API is running."""
    return {"message": "Welcome to the Hare Krishna Game API!", "status": "online"}
