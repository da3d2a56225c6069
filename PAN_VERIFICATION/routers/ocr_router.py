from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.concurrency import run_in_threadpool
from providers.ocr_provider import get_ocr_provider, TesseractOCRProvider
from schemas.ocr_schema import PanExtractionResponse
from services.ocr_service import OCRService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ocr", tags=["PAN OCR"])

PROCESSING_ERROR = {"error": "Failed to process the image. Please try again."}

@router.post("/extract-pan", response_model=PanExtractionResponse)
async def extract_pan(
    image: Optional[UploadFile] = File(None, description="PAN card photo, image/*, max 5MB"),
):
    """Demonstration endpoint: validates the upload and answers with a canned result."""
    try:
        await OCRService.read_upload(image)
        data = await run_in_threadpool(OCRService.simulate_extraction)
        return PanExtractionResponse(
            success=True,
            data=data,
            message="PAN card details extracted successfully",
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"OCR extraction error: {e}", exc_info=True)
        raise HTTPException(500, PROCESSING_ERROR)


@router.post("/scan-pan", response_model=PanExtractionResponse)
async def scan_pan(
    image: Optional[UploadFile] = File(None, description="PAN card photo, image/*, max 5MB"),
    provider: TesseractOCRProvider = Depends(get_ocr_provider),
):
    try:
        contents = await OCRService.read_upload(image)
        data = await run_in_threadpool(OCRService.scan_pan, contents, provider)
        return PanExtractionResponse(
            success=True,
            data=data,
            message="PAN card details extracted successfully",
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"PAN scan error: {e}", exc_info=True)
        raise HTTPException(500, PROCESSING_ERROR)
