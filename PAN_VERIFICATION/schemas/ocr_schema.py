from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

NOT_FOUND = "NOT_FOUND"

class OCRLine(BaseModel):
    text: str
    confidence: float = 0.0

class OCRResult(BaseModel):
    text: str = ""
    lines: List[OCRLine] = []

    @property
    def confidence(self) -> float:
        """Mean of the per-line confidences, 0 when nothing was recognised."""
        if not self.lines:
            return 0.0
        return sum(line.confidence for line in self.lines) / len(self.lines)

class ExtractedPanData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pan_number: str = Field(NOT_FOUND, alias="panNumber")
    name: str = NOT_FOUND
    date_of_birth: str = Field(NOT_FOUND, alias="dateOfBirth")
    confidence: Optional[float] = None

class PanExtractionResponse(BaseModel):
    success: bool
    data: ExtractedPanData
    message: str
