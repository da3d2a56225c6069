import logging
import random
import time
from datetime import date
from typing import Optional
from fastapi import HTTPException, UploadFile
from core.config import OCR_MAX_FILE_SIZE_BYTES, OCR_MAX_FILE_SIZE_MB, OCR_SIMULATED_DELAY_SECONDS
from providers.ocr_provider import TesseractOCRProvider
from schemas.ocr_schema import ExtractedPanData, NOT_FOUND
from utils.image_preprocessing import preprocess_image, ImagePreprocessingError
from utils.pan_extractor import extract_pan_data, is_valid_pan, parse_iso_date, MIN_BIRTH_DATE

logger = logging.getLogger(__name__)

# Demo data served by the canned extraction endpoint
MOCK_RESULTS = [
    {"pan_number": "ABCDE1234F", "name": "JOHN RONALD DOE", "date_of_birth": "1990-05-15", "confidence": 0.95},
    {"pan_number": "XYZAB5678G", "name": "JANE SMITH",      "date_of_birth": "1985-12-20", "confidence": 0.92},
    {"pan_number": "PQRST9012H", "name": "MICHAEL BROWN",   "date_of_birth": "1978-08-10", "confidence": 0.88},
    {"pan_number": "LMNOP3456I", "name": "SARAH WILSON",    "date_of_birth": "1992-03-25", "confidence": 0.91},
    {"pan_number": "UVWXY7890J", "name": "DAVID JOHNSON",   "date_of_birth": "1980-11-08", "confidence": 0.89},
]


def is_valid_iso_date(value: str, today: Optional[date] = None) -> bool:
    parsed = parse_iso_date(value)
    if parsed is None:
        return False
    return MIN_BIRTH_DATE <= parsed <= (today or date.today())


class OCRService:

    @staticmethod
    async def read_upload(image: Optional[UploadFile]) -> bytes:
        if image is None or not image.filename:
            raise HTTPException(400, {"error": "No image file provided"})

        if not (image.content_type or "").startswith("image/"):
            raise HTTPException(400, {"error": "Invalid file type. Please upload an image."})

        contents = await image.read()
        if len(contents) > OCR_MAX_FILE_SIZE_BYTES:
            raise HTTPException(
                400,
                {"error": f"File size too large. Please upload an image smaller than {OCR_MAX_FILE_SIZE_MB}MB."},
            )
        return contents

    @staticmethod
    def simulate_extraction() -> ExtractedPanData:
        """Random canned result; stands in for a hosted OCR service."""
        if OCR_SIMULATED_DELAY_SECONDS > 0:
            time.sleep(OCR_SIMULATED_DELAY_SECONDS)

        result = random.choice(MOCK_RESULTS)

        if not is_valid_pan(result["pan_number"]):
            raise ValueError("Invalid PAN number format detected")
        if not is_valid_iso_date(result["date_of_birth"]):
            raise ValueError("Invalid date format detected")

        return ExtractedPanData(**result)

    @staticmethod
    def scan_pan(image_bytes: bytes, provider: TesseractOCRProvider) -> ExtractedPanData:
        try:
            prepared = preprocess_image(image_bytes)
        except ImagePreprocessingError as e:
            raise HTTPException(400, {"error": "Could not read the uploaded image. Please upload a valid image file."}) from e

        ocr = provider.recognize(prepared)
        data = extract_pan_data(
            ocr.text,
            lines=[line.text for line in ocr.lines],
            confidence=ocr.confidence,
        )
        found = {
            "pan":  is_valid_pan(data.pan_number),
            "name": data.name != NOT_FOUND,
            "dob":  data.date_of_birth != NOT_FOUND,
        }
        logger.info(f"PAN scan finished: {found}")
        return data
