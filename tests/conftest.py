"""
Pytest configuration and fixtures for PDFDesk tests.
"""

import asyncio
import os
import shutil
import tempfile

import pytest

# Set test environment variables before importing the app
os.environ["ENVIRONMENT"] = "development"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_PATH"] = tempfile.mkdtemp(prefix="pdfdesk_test_uploads_")

import fitz
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.config import settings
from app.db.mongo import set_database
from app.main import app

API = settings.API_PREFIX


def build_pdf(pages: int = 1, label: str = "page", width: float = 595, height: float = 842) -> bytes:
    """PDF whose page i carries the text '<label>-<i>'."""
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"{label}-{i}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def page_texts(data: bytes) -> list:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(scope="session", autouse=True)
def cleanup_upload_root():
    yield
    shutil.rmtree(os.environ["UPLOAD_PATH"], ignore_errors=True)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Per-test upload directory."""
    monkeypatch.setattr(settings, "UPLOAD_PATH", str(tmp_path))
    return tmp_path


@pytest.fixture
def db(upload_dir):
    """Fresh in-memory database installed as the app database."""
    database = AsyncMongoMockClient()["pdfdesk_test"]
    set_database(database)
    yield database
    set_database(None)


@pytest.fixture
def client(db):
    """Test client; the lifespan (real MongoDB connection) is not run."""
    return TestClient(app)


def register(client, email="jane@example.com", password="secret123", full_name="Jane Doe"):
    response = client.post(
        f"{API}/auth/register",
        json={"fullName": full_name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client):
    token = register(client, email="other@example.com")["token"]
    return {"Authorization": f"Bearer {token}"}


def upload(client, headers, *parts):
    """Uploads (name, bytes[, content_type]) parts and returns the response."""
    files = []
    for part in parts:
        name, data = part[0], part[1]
        content_type = part[2] if len(part) > 2 else "application/pdf"
        files.append(("files", (name, data, content_type)))
    return client.post(f"{API}/files/upload", files=files, headers=headers)


@pytest.fixture
def uploaded(client, auth_headers):
    """Uploads a PDF and returns its file record."""
    def _upload(name="doc.pdf", pages=1, label="page"):
        response = upload(client, auth_headers, (name, build_pdf(pages, label)))
        assert response.status_code == 201, response.text
        return response.json()["data"]["files"][0]
    return _upload


def download(client, headers, file_id) -> bytes:
    response = client.get(f"{API}/files/{file_id}/download", headers=headers)
    assert response.status_code == 200, response.text
    return response.content
