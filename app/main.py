import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import config
from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.core.errors import AppError
from app.core.logging_config import setup_logging, sanitize_log_data

# ✅ Import All API Routes
from app.api.routes import auth, applications, uploads, stripe_checkout, jobs, profile, ai, health
from app.db.init_db import init_db

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Job Board API")

# ✅ CORS: ONLY THE CONFIGURED FRONTEND ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Stripe-Signature"],
)


# ============================================
# ✅ ERROR HANDLERS
# ============================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Raised by the framework itself, e.g. a missing bearer token or an unknown route
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "invalid"))
    message = "Invalid request. " + "; ".join(problems)
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An unexpected server error occurred."},
    )


@app.on_event("startup")
def on_startup():
    logger.info(
        "Starting Job Board API: %s",
        sanitize_log_data({
            "database_url": config.DATABASE_URL,
            "openai_model": config.OPENAI_MODEL,
            "openai_api_key": config.OPENAI_API_KEY,
            "stripe_secret_key": config.STRIPE_SECRET_KEY,
            "cloudinary_cloud_name": config.CLOUDINARY_CLOUD_NAME,
            "free_job_posts": config.FREE_JOB_POSTS,
        }),
    )
    init_db()


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(jobs.router)
app.include_router(applications.router)
app.include_router(uploads.router)
app.include_router(ai.router)
app.include_router(stripe_checkout.router)
app.include_router(health.router)


# ============================================
# ✅ HEALTH CHECK ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Job Board API running"}
