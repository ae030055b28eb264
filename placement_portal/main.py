# ========================================
# placement_portal/main.py
# ========================================

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from placement_portal.database import connect_to_mongo, close_mongo_connection
from placement_portal.exceptions import (
    PortalError,
    portal_exception_handler,
    request_validation_handler,
    http_exception_handler,
    general_exception_handler
)

# ===========================
# IMPORT ALL ROUTERS
# ===========================

from placement_portal.routes.auth import router as auth_router
from placement_portal.routes.public import router as public_router
from placement_portal.routes.student import router as student_router
from placement_portal.routes.company import router as company_router
from placement_portal.routes.college import router as college_router
from placement_portal.routes.admin import router as admin_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title="College Job Portal API",
    description="Campus placement portal for admins, colleges, companies and students",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ===========================
# CORS MIDDLEWARE
# ===========================
raw_origins = os.getenv("ALLOWED_ORIGINS", "")
origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===========================
# EXCEPTION HANDLERS
# ===========================

app.add_exception_handler(PortalError, portal_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
async def start_db():
    """Connect to MongoDB on startup"""
    await connect_to_mongo()

@app.on_event("shutdown")
async def stop_db():
    """Close MongoDB connection on shutdown"""
    await close_mongo_connection()

# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(auth_router)
app.include_router(public_router)
app.include_router(student_router)
app.include_router(company_router)
app.include_router(college_router)
app.include_router(admin_router)

# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
async def root():
    return {
        "status": "✅ College Job Portal API Running",
        "version": "1.0.0",
        "documentation": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": "1.0.0"}
