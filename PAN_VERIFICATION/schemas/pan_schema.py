from pydantic import BaseModel
from typing import Optional

class PANVerificationRequest(BaseModel):
    pan: Optional[str] = None
    dob: Optional[str] = None
    name_as_per_pan: Optional[str] = None
    reason: Optional[str] = None
