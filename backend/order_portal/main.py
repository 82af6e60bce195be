from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from order_portal.config import ConfigurationError, get_settings
from order_portal.routers import submit
from order_portal.services.email_provider import EmailProviderError
from order_portal.services.submission_service import SubmissionRejected
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)

settings = get_settings()

# Log startup information
logger.info("="*60)
logger.info("Starting Production Order Portal API")
logger.info("="*60)
logger.info(f"Email provider: {settings.email_provider}")
logger.info(f"Provider configured: {not settings.missing_provider_settings()}")
logger.info(f"CC address configured: {bool(settings.cc_email)}")
logger.info(f"Access code required: {settings.access_code_required}")
logger.info(f"Max PDF bytes: {settings.max_pdf_bytes}")
logger.info("="*60)

if settings.missing_provider_settings():
    logger.error(
        f"Email delivery is not configured, submissions will fail until set: "
        f"{', '.join(settings.missing_provider_settings())}"
    )

app = FastAPI(
    title="Production Order Portal API",
    description="Forwards production orders and their PO PDFs to the production mailbox",
    version="1.0.0"
)

# Parse CORS origins from config
def parse_cors_origins(origins_str: str) -> list:
    """Parse CORS origins string into a list, excluding wildcards."""
    origins = []
    for origin in origins_str.split(","):
        origin = origin.strip()
        # Skip wildcard entries (will be handled by allow_origin_regex)
        if "*" not in origin and origin:
            origins.append(origin)
    return origins

# Default origins for local development
default_origins = ["http://localhost:3000", "http://localhost:3001"]
all_origins = parse_cors_origins(settings.cors_origins) or default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=all_origins,
    allow_origin_regex=r"https://.*\.vercel\.app$",  # Allow all Vercel deployments
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(submit.router)


@app.get("/")
def root():
    return {"message": "Production Order Portal API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.exception_handler(SubmissionRejected)
async def submission_rejected_handler(request: Request, exc: SubmissionRejected):
    logger.info(f"Submission rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Email delivery is not configured: {exc}")
    return JSONResponse(status_code=500, content={"error": "Email delivery is not configured."})


@app.exception_handler(EmailProviderError)
async def email_provider_error_handler(request: Request, exc: EmailProviderError):
    logger.error(f"Email provider error: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Server error"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Routing errors and unparseable multipart bodies use the same {"error"} shape
    logger.info(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Exception handler to ensure CORS headers are always sent
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to ensure CORS headers are sent even on errors"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    origin = request.headers.get("origin", "*")
    is_allowed = origin.endswith(".vercel.app") or origin in all_origins
    cors_origin = origin if is_allowed else "*"

    return JSONResponse(
        status_code=500,
        content={"error": "Server error"},
        headers={
            "Access-Control-Allow-Origin": cors_origin,
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "*",
            "Access-Control-Allow-Credentials": "true",
        }
    )
