from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from providers.pan_provider import get_pan_provider, SandboxPANProvider
from services.pan_verification_service import PANVerificationService
import logging
from schemas.pan_schema import PANVerificationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["PAN Verification"])

@router.post("/verify-pan")
def verify_pan(
    request: PANVerificationRequest,
    provider: SandboxPANProvider = Depends(get_pan_provider),
):
    try:
        body, status = PANVerificationService.verify_pan(request, provider)
        return JSONResponse(content=body, status_code=status)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in verify-pan: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": "Internal server error"})
