import io

import numpy as np
from PIL import Image

from core.config import OCR_MAX_FILE_SIZE_BYTES
from services.ocr_service import MOCK_RESULTS, OCRService
from conftest import make_image_bytes

EXTRACT_URL = "/api/ocr/extract-pan"
SCAN_URL = "/api/ocr/scan-pan"


def _upload(data=None, content_type="image/png", field="image"):
    return {field: ("card.png", data if data is not None else make_image_bytes(), content_type)}


class TestUploadChecks:

    def test_missing_file(self, client):
        for url in (EXTRACT_URL, SCAN_URL):
            response = client.post(url, files=_upload(field="document"))
            assert response.status_code == 400
            assert response.json() == {"error": "No image file provided"}

    def test_wrong_content_type(self, client):
        for url in (EXTRACT_URL, SCAN_URL):
            response = client.post(url, files=_upload(b"hello", content_type="text/plain"))
            assert response.status_code == 400
            assert response.json() == {"error": "Invalid file type. Please upload an image."}

    def test_file_too_large(self, client, ocr_provider):
        too_big = b"\0" * (OCR_MAX_FILE_SIZE_BYTES + 1)
        for url in (EXTRACT_URL, SCAN_URL):
            response = client.post(url, files=_upload(too_big))
            assert response.status_code == 400
            assert "File size too large" in response.json()["error"]
        assert ocr_provider.received == []


class TestCannedExtraction:

    def test_returns_one_of_the_canned_results(self, client):
        response = client.post(EXTRACT_URL, files=_upload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "PAN card details extracted successfully"
        assert set(body["data"]) == {"panNumber", "name", "dateOfBirth", "confidence"}
        assert body["data"]["panNumber"] in {r["pan_number"] for r in MOCK_RESULTS}

    def test_simulated_result_is_valid(self):
        data = OCRService.simulate_extraction()
        assert data.pan_number in {r["pan_number"] for r in MOCK_RESULTS}
        assert 0 < data.confidence <= 1

    def test_invalid_canned_entry_is_a_server_error(self, client, monkeypatch):
        monkeypatch.setattr(
            "services.ocr_service.MOCK_RESULTS",
            [{"pan_number": "BAD", "name": "X", "date_of_birth": "1990-01-01", "confidence": 0.5}],
        )
        response = client.post(EXTRACT_URL, files=_upload())
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process the image. Please try again."}


class TestScan:

    def test_pipeline_fills_the_form(self, client, ocr_provider):
        ocr_provider.lines = [
            ("INCOME TAX DEPARTMENT", 91.0),
            ("Name", 88.0),
            ("RAHUL SHARMA", 90.0),
            ("Date of Birth", 85.0),
            ("15/05/1990", 80.0),
            ("ABCDE1234F", 94.0),
        ]

        response = client.post(SCAN_URL, files=_upload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["panNumber"] == "ABCDE1234F"
        assert body["data"]["name"] == "RAHUL SHARMA"
        assert body["data"]["dateOfBirth"] == "1990-05-15"
        assert body["data"]["confidence"] == 88.0

    def test_engine_receives_preprocessed_grayscale_png(self, client, ocr_provider):
        client.post(SCAN_URL, files=_upload(make_image_bytes(color=(200, 100, 0))))

        assert len(ocr_provider.received) == 1
        image = Image.open(io.BytesIO(ocr_provider.received[0]))
        assert image.format == "PNG"
        pixels = np.asarray(image.convert("RGB"))
        assert (pixels == 90).all()

    def test_unreadable_card_returns_not_found_fields(self, client, ocr_provider):
        response = client.post(SCAN_URL, files=_upload())

        assert response.status_code == 200
        assert response.json()["data"] == {
            "panNumber": "NOT_FOUND",
            "name": "NOT_FOUND",
            "dateOfBirth": "NOT_FOUND",
            "confidence": 0.0,
        }

    def test_undecodable_image(self, client, ocr_provider):
        response = client.post(SCAN_URL, files=_upload(b"not really a png"))
        assert response.status_code == 400
        assert "error" in response.json()
        assert ocr_provider.received == []

    def test_oversized_image_is_rejected_before_ocr(self, client, ocr_provider, monkeypatch):
        monkeypatch.setattr("utils.image_preprocessing.OCR_MAX_IMAGE_PIXELS", 100)
        response = client.post(SCAN_URL, files=_upload(make_image_bytes(size=(40, 20))))
        assert response.status_code == 400
        assert "error" in response.json()
        assert ocr_provider.received == []

    def test_engine_failure(self, client, ocr_provider):
        ocr_provider.error = RuntimeError("OCR engine unavailable")
        response = client.post(SCAN_URL, files=_upload())
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process the image. Please try again."}
