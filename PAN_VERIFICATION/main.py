import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from core.config import CORS_ORIGINS, LOG_LEVEL
from core.database import Base, engine, SessionLocal
from routers.auth_router import router as auth_router
from routers.ocr_router import router as ocr_router
from routers.pan_router import router as pan_router
from dummy_data import seed_users
import models.user

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting PAN verification backend...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        seed_users(db)
    finally:
        db.close()

    yield

    logger.info("PAN verification backend stopped")

app = FastAPI(title="PAN Verification Module", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # dict details are already the response body; plain strings become {"message": ...}
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.info(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"message": message})

app.include_router(auth_router)
app.include_router(ocr_router)
app.include_router(pan_router)

@app.get("/")
def root():
    return {
        "status": "PAN Verification API is running"
    }
