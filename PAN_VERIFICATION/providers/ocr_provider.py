import io
import logging
import pytesseract
from PIL import Image, UnidentifiedImageError
from core.config import OCR_LANGUAGE, TESSERACT_CMD
from schemas.ocr_schema import OCRLine, OCRResult

logger = logging.getLogger(__name__)

if TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD


class TesseractOCRProvider:
    """
    Tesseract via pytesseract. Words are grouped back into lines by
    (block, paragraph, line) and each line's confidence is the mean of its
    word confidences (0-100).

    Unreadable pictures give an empty result; only an engine that cannot run
    raises RuntimeError.
    """

    def __init__(self, language: str = OCR_LANGUAGE):
        self.language = language

    def recognize(self, image_bytes: bytes) -> OCRResult:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"OCR input could not be decoded: {e}")
            return OCRResult()

        try:
            data = pytesseract.image_to_data(
                image, lang=self.language, output_type=pytesseract.Output.DICT
            )
        except pytesseract.TesseractNotFoundError as e:
            logger.error("Tesseract binary not found. Install it or set TESSERACT_CMD.")
            raise RuntimeError("OCR engine unavailable") from e
        except pytesseract.TesseractError as e:
            logger.error(f"Tesseract failed: {e}")
            raise RuntimeError("OCR engine failed") from e

        result = self._group_lines(data)
        logger.info(f"OCR recognised {len(result.lines)} line(s), confidence={result.confidence:.1f}")
        return result

    @staticmethod
    def _group_lines(data: dict) -> OCRResult:
        grouped = {}
        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            conf = float(data["conf"][i])
            if not word or conf < 0:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            grouped.setdefault(key, []).append((word, conf))

        lines = [
            OCRLine(
                text=" ".join(w for w, _ in words),
                confidence=sum(c for _, c in words) / len(words),
            )
            for words in grouped.values()
        ]
        return OCRResult(text="\n".join(line.text for line in lines), lines=lines)


def get_ocr_provider() -> TesseractOCRProvider:
    return TesseractOCRProvider()
