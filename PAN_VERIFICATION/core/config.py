import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# Sandbox KYC API
SANDBOX_BASE_URL        = os.getenv("SANDBOX_BASE_URL", "https://api.sandbox.co.in").rstrip("/")
SANDBOX_API_KEY         = os.getenv("SANDBOX_API_KEY", "")
SANDBOX_API_SECRET      = os.getenv("SANDBOX_API_SECRET", "")
SANDBOX_API_VERSION     = os.getenv("SANDBOX_API_VERSION", "")
SANDBOX_TIMEOUT_SECONDS = float(os.getenv("SANDBOX_TIMEOUT_SECONDS", "30"))
SANDBOX_PAN_ENTITY      = "in.co.sandbox.kyc.pan_verification.request"

# Image upload / OCR
OCR_MAX_FILE_SIZE_MB        = int(os.getenv("OCR_MAX_FILE_SIZE_MB", "5"))
OCR_MAX_FILE_SIZE_BYTES     = OCR_MAX_FILE_SIZE_MB * 1024 * 1024
OCR_LANGUAGE                = os.getenv("OCR_LANGUAGE", "eng")
TESSERACT_CMD               = os.getenv("TESSERACT_CMD", "")
PREPROCESS_CONTRAST         = int(os.getenv("PREPROCESS_CONTRAST", "40"))
OCR_MAX_IMAGE_PIXELS        = int(os.getenv("OCR_MAX_IMAGE_PIXELS", "25000000"))
OCR_SIMULATED_DELAY_SECONDS = float(os.getenv("OCR_SIMULATED_DELAY_SECONDS", "0"))

# Mock auth
PASSWORD_MIN_LENGTH = 6
