import logging
from typing import Tuple
from fastapi import HTTPException
from providers.pan_provider import SandboxPANProvider
from schemas.pan_schema import PANVerificationRequest
from utils.pan_extractor import parse_iso_date

logger = logging.getLogger(__name__)


def format_dob_for_sandbox(dob: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY"""
    parsed = parse_iso_date(dob)
    if parsed is None:
        raise HTTPException(400, {"error": "DOB must be in YYYY-MM-DD format"})
    return parsed.strftime("%d/%m/%Y")


class PANVerificationService:

    @staticmethod
    def verify_pan(request: PANVerificationRequest, provider: SandboxPANProvider) -> Tuple[dict, int]:
        """
        Authenticate, then verify. Returns the upstream (body, status) as-is:
        a failed authenticate call is relayed instead of the verify result.
        """
        fields = (request.pan, request.dob, request.name_as_per_pan, request.reason)
        if not all(f and f.strip() for f in fields):
            raise HTTPException(400, {"error": "PAN, DOB, Name and Reason are required"})

        formatted_dob = format_dob_for_sandbox(request.dob)

        auth_status, auth_body = provider.authenticate()
        if not 200 <= auth_status < 300:
            logger.error(f"Sandbox authentication failed with status {auth_status}")
            return auth_body, auth_status

        access_token = provider.extract_token(auth_body)
        if not access_token:
            raise RuntimeError("Sandbox authentication response carried no access token")

        verify_status, verify_body = provider.verify(
            access_token,
            pan=request.pan,
            name_as_per_pan=request.name_as_per_pan,
            date_of_birth=formatted_dob,
            reason=request.reason,
        )
        logger.info(f"PAN verification relayed with status {verify_status}")
        return verify_body, verify_status
