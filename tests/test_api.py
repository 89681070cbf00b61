"""
API integration tests

These tests drive the studio endpoints with FastAPI's TestClient and a fake
generator in place of the Imagen backend.
"""
import pytest
from fastapi.testclient import TestClient

from conftest import FakeGenerator, make_data_url
from imagen_studio.errors import ConfigurationError


@pytest.fixture
def generator():
    return FakeGenerator(result=make_data_url(size=(40, 20), format="JPEG"))


@pytest.fixture
def client(monkeypatch, generator):
    """Provide a TestClient whose lifespan builds the fake generator"""
    from imagen_studio import main

    monkeypatch.setattr(main, "build_generator", lambda settings: generator)
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.mark.integration
class TestStudioEndpoints:
    """Tests for prompt, generation and reference endpoints"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_aspect_ratios(self, client):
        data = client.get("/aspect-ratios").json()

        assert [r["value"] for r in data] == ["1:1", "16:9", "9:16", "4:3", "3:4"]
        assert data[0]["label"] == "Square"

    def test_initial_state(self, client):
        data = client.get("/state").json()

        assert data["status"] == "idle"
        assert data["aspect_ratio"] == "1:1"
        assert data["prompt"].startswith("A photorealistic image of a majestic lion")
        assert data["has_image"] is False

    def test_generate_and_fetch_image(self, client, generator):
        client.put("/prompt", json={"prompt": "A red circle"})
        client.put("/aspect-ratio", json={"aspect_ratio": "16:9"})

        response = client.post("/generate")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["has_image"] and data["has_original"]
        assert generator.requests[0].prompt == "A red circle"
        assert generator.requests[0].aspect_ratio.value == "16:9"

        image = client.get("/image/current")
        assert image.status_code == 200
        assert image.headers["content-type"] == "image/jpeg"

    def test_generate_blank_prompt_is_noop(self, client, generator):
        response = client.post("/generate", json={"prompt": "   "})

        assert response.status_code == 200
        assert response.json()["status"] == "idle"
        assert generator.requests == []

    def test_generate_failure_reports_error(self, client, generator):
        generator.error = RuntimeError("upstream exploded")

        data = client.post("/generate", json={"prompt": "A red circle"}).json()

        assert data["status"] == "error"
        assert data["error"].startswith("Failed to generate image.")
        assert client.get("/image/current").status_code == 404

    def test_invalid_aspect_ratio(self, client):
        response = client.put("/aspect-ratio", json={"aspect_ratio": "2:1"})

        assert response.status_code == 422

    def test_reference_upload_and_remove(self, client, generator):
        response = client.post("/reference", files={"image": ("ref.png", b"PNGDATA", "image/png")})

        assert response.status_code == 200
        assert response.json()["has_reference_image"] is True

        client.post("/generate", json={"prompt": "A red circle"})
        assert generator.requests[0].reference_image == "data:image/png;base64,UE5HREFUQQ=="

        data = client.delete("/reference").json()
        assert data["has_reference_image"] is False
        assert data["reference_input_revision"] == 1

    def test_reference_upload_wrong_type(self, client):
        response = client.post("/reference", files={"image": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert response.json()["detail"] == "Please upload a valid image file (PNG, JPG, WebP)."
        assert client.get("/state").json()["error"] == response.json()["detail"]

    def test_reference_upload_too_large(self, client, generator):
        oversized = b"\0" * (5 * 1024 * 1024)

        response = client.post("/reference", files={"image": ("big.png", oversized, "image/png")})

        assert response.status_code == 400
        assert response.json()["detail"] == "Image size should be less than 4MB."
        assert client.get("/state").json()["has_reference_image"] is False

    def test_reference_upload_reads_only_past_the_limit(self, client, monkeypatch):
        from starlette.datastructures import UploadFile

        reads = []
        original_read = UploadFile.read

        async def recording_read(self, size=-1):
            reads.append(size)
            return await original_read(self, size)

        monkeypatch.setattr(UploadFile, "read", recording_read)
        response = client.post(
            "/reference", files={"image": ("big.png", b"\0" * (5 * 1024 * 1024), "image/png")}
        )

        assert response.status_code == 400
        assert reads == [4 * 1024 * 1024 + 1]


@pytest.mark.integration
class TestEditEndpoints:
    """Tests for the edit session endpoints"""

    def test_open_without_image(self, client):
        assert client.post("/edit/open").status_code == 404

    def test_filters_require_session(self, client):
        response = client.put("/edit/filters/brightness", json={"value": 120})

        assert response.status_code == 409

    def test_edit_flow(self, client):
        client.post("/generate", json={"prompt": "A red circle"})

        data = client.post("/edit/open").json()
        assert data["is_editing"] is True
        assert data["crop_box"] == {"x": 0, "y": 0, "width": 40, "height": 20}

        client.put("/edit/crop", json={"x": 10, "y": 5, "width": 20, "height": 10})
        data = client.put("/edit/filters/sepia", json={"value": 30}).json()
        assert data["filter_style"] == (
            "brightness(100%) contrast(100%) saturate(100%) grayscale(0%) sepia(30%) invert(0%)"
        )

        preview = client.get("/edit/preview").json()
        assert preview["image"].startswith("data:image/png;base64,")

        data = client.post("/edit/save").json()
        assert data["is_editing"] is False
        assert data["filters"] is None

        current = client.get("/image/current").content
        original = client.get("/image/original").content
        assert current != original

    def test_invalid_filter_value(self, client):
        client.post("/generate", json={"prompt": "A red circle"})
        client.post("/edit/open")

        response = client.put("/edit/filters/grayscale", json={"value": 150})

        assert response.status_code == 400

    def test_unknown_filter_channel(self, client):
        client.post("/generate", json={"prompt": "A red circle"})
        client.post("/edit/open")

        assert client.put("/edit/filters/blur", json={"value": 1}).status_code == 422

    def test_cancel_keeps_image(self, client):
        client.post("/generate", json={"prompt": "A red circle"})
        before = client.get("/image/current").content
        client.post("/edit/open")
        client.put("/edit/filters/invert", json={"value": 100})

        data = client.post("/edit/cancel").json()

        assert data["is_editing"] is False
        assert client.get("/image/current").content == before


def test_startup_fails_without_api_key(monkeypatch):
    from imagen_studio import main

    def missing_key(settings):
        raise ConfigurationError("API_KEY environment variable not set.")

    monkeypatch.setattr(main, "build_generator", missing_key)
    with pytest.raises(ConfigurationError):
        with TestClient(main.app):
            pass
