"""
HTTP API tests for the file-path and upload analysis endpoints.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from fitparse.utils import FitParseError

from api.server import create_app, get_decoder
from config import settings
from models.telemetry import DecodedActivity, LeftReferenced, RightReferenced, SessionSummary

from conftest import make_sample


@pytest.fixture
def decoder():
    mock = MagicMock()
    activity = DecodedActivity(
        samples=(
            make_sample(100, LeftReferenced(52), (70, 72), (20, 22)),
            make_sample(250, RightReferenced(45), (50, 52), None, offset=1),
        ),
        session=SessionSummary(average_power=175, threshold_power=200),
    )
    mock.decode.return_value = activity
    mock.decode_file.return_value = activity
    return mock


@pytest.fixture
def client(decoder):
    app = create_app()
    app.dependency_overrides[get_decoder] = lambda: decoder
    return TestClient(app)


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Pedal Power Analyser API"}

    response = client.get("/api/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "OK"
    assert "timestamp" in response.json()


class TestParseFitPath:

    def test_success(self, client, decoder, fake_fit_file):
        response = client.post("/api/parse-fit", json={"filePath": str(fake_fit_file)})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["averagePower"] == 175
        assert data["thresholdPower"] == 200
        assert data["leftRightBalance"] == {"left": 54, "right": 47}
        assert data["torqueEffectiveness"] == {"left": 60, "right": 62}
        assert data["pedalSmoothness"] == {"left": 20, "right": 22}
        assert [zone["zone"] for zone in data["powerZoneBalances"]] == ["Z1", "Z6"]
        assert data["powerZoneBalances"][1]["powerRange"] == "240+W"
        assert data["message"] == "Power data found"
        decoder.decode_file.assert_called_once_with(fake_fit_file)

    def test_missing_path(self, client):
        response = client.post("/api/parse-fit", json={})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "File path is required"}

    def test_no_body(self, client, decoder):
        response = client.post("/api/parse-fit")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "File path is required"}
        decoder.decode_file.assert_not_called()

    @pytest.mark.parametrize("file_path", [123, ["ride.fit"], ""])
    def test_path_not_a_string(self, client, file_path):
        response = client.post("/api/parse-fit", json={"filePath": file_path})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "File path is required"}

    def test_invalid_file(self, client, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("x" * 500)

        response = client.post("/api/parse-fit", json={"filePath": str(path)})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Invalid FIT file or file does not exist"}

    def test_decode_failure(self, client, decoder, fake_fit_file):
        decoder.decode_file.side_effect = FitParseError("Invalid .FIT File Header")

        response = client.post("/api/parse-fit", json={"filePath": str(fake_fit_file)})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Failed to parse FIT file", "details": "Invalid .FIT File Header"}

    def test_no_power_data(self, client, decoder, fake_fit_file):
        decoder.decode_file.return_value = DecodedActivity()

        data = client.post("/api/parse-fit", json={"filePath": str(fake_fit_file)}).json()
        assert data["averagePower"] == 0
        assert data["thresholdPower"] is None
        assert data["leftRightBalance"] is None
        assert data["powerZoneBalances"] == []
        assert data["message"] == "No power data in file"


class TestParseFitUpload:

    def test_success(self, client, decoder):
        response = client.post(
            "/activity/parse",
            content=b"\x0e\x10fit-bytes",
            headers={"Content-Type": "application/octet-stream"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["averagePower"] == 175
        decoder.decode.assert_called_once_with(b"\x0e\x10fit-bytes")

    def test_empty_body(self, client):
        response = client.post("/activity/parse", content=b"",
                               headers={"Content-Type": "application/octet-stream"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "No file data received"}

    def test_body_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)

        response = client.post("/activity/parse", content=b"x" * 11,
                               headers={"Content-Type": "application/octet-stream"})
        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def test_chunked_body_too_large(self, client, decoder, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)

        def chunks():
            yield b"x" * 6
            yield b"x" * 6

        response = client.post("/activity/parse", content=chunks(),
                               headers={"Content-Type": "application/octet-stream"})
        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        decoder.decode.assert_not_called()

    def test_chunked_body_within_limit(self, client, decoder):
        def chunks():
            yield b"\x0e\x10"
            yield b"fit-bytes"

        response = client.post("/activity/parse", content=chunks(),
                               headers={"Content-Type": "application/octet-stream"})
        assert response.status_code == status.HTTP_200_OK
        decoder.decode.assert_called_once_with(b"\x0e\x10fit-bytes")

    def test_decode_failure(self, client, decoder):
        decoder.decode.side_effect = FitParseError("Tried to read 12 bytes from .FIT file but got 4")

        response = client.post("/activity/parse", content=b"abcd",
                               headers={"Content-Type": "application/octet-stream"})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["details"] == "Tried to read 12 bytes from .FIT file but got 4"
