import pytest
from fastapi.testclient import TestClient

from app.config.mock_firestore import MockFirestore
from app.core.settings import Settings
from app.main import create_app
from app.services.report_service import ReportService
from app.services.report_store import FirestoreReportStore
from app.services.upload_storage import UploadStorage


VALID_FIELDS = {
    "name": "Asha",
    "mobile": "9999999999",
    "type": "Pothole",
    "description": "Large pothole on Main St",
    "location": "Main St & 3rd",
}


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        USE_MOCK_DB=True,
        MOCK_DB_PATH=str(tmp_path / "mock_db.json"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_db(tmp_path):
    return MockFirestore(str(tmp_path / "service_db.json"))


@pytest.fixture
def uploads(tmp_path):
    storage = UploadStorage(str(tmp_path / "service_uploads"))
    storage.ensure_directory()
    return storage


@pytest.fixture
def service(mock_db, uploads):
    return ReportService(FirestoreReportStore(lambda: mock_db), uploads)
