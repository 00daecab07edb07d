# app/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import sys
import time
import psutil

from app.core.database import test_connection, init_db, AsyncSessionLocal
from app.core.config import settings
from app.core.exceptions import StorageUnavailableError
from app.core.seeding_logic import seed_database
from app.core.storage import storage

# Routers
from app.api.endpoints import (
    auth as auth_router,
    students as students_router,
    clearance as clearance_router,
    risks as risks_router,
    officials as officials_router,
    admin as admin_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="CCMS Clearance Backend",
    version="1.0.0",
    description="Backend service for the Clearance Check Management System.",
)

START_TIME = time.time()


# ------------------------------------------------------------
# STORAGE FAILURES -> keep serving from memory
# ------------------------------------------------------------
@app.exception_handler(OperationalError)
@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    storage.use_memory(str(exc))
    return JSONResponse(
        status_code=503,
        content={
            "detail": "Storage is temporarily unavailable. Please retry; "
                      "changes made now will not be saved permanently."
        },
    )


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    db_latency = 0
    if storage.degraded:
        current_db_status = "Memory"
    else:
        try:
            await test_connection()
            current_db_status = "Connected"
            db_latency = round((time.time() - db_start) * 1000, 2)
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
            current_db_status = "Error"

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
        "storage_mode": storage.mode,
        "storage_reason": storage.reason,
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(students_router.router)
app.include_router(clearance_router.router)
app.include_router(risks_router.router)
app.include_router(officials_router.router)
app.include_router(admin_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("Starting CCMS Clearance Backend...")

    # 1) Database connection test + tables
    try:
        await test_connection()
        await init_db()
        storage.use_database()
        logger.success("Database connection established. Tables ready.")
    except Exception as e:
        logger.exception("Database unavailable at startup.")
        storage.use_memory(str(e))
        return

    # 2) Seed demo records into empty tables
    if settings.SEED_ON_STARTUP:
        try:
            async with AsyncSessionLocal() as session:
                await seed_database(session)
        except SQLAlchemyError as e:
            logger.exception("Seeding failed.")
            storage.use_memory(str(e))
            return

    logger.success("Backend startup completed successfully.\n")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "CCMS Clearance Backend",
        "version": app.version,
        "storage_mode": storage.mode,
        "message": "Backend running successfully",
    }
