import os
import re

from app.services.report_service import ReportService
from app.services.report_store import FirestoreReportStore
from tests.conftest import VALID_FIELDS


def test_root_is_plain_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Server Running"


def test_submit_report_without_image(client):
    response = client.post("/report", data=VALID_FIELDS)

    assert response.status_code == 201
    body = response.json()
    assert body["msg"] == "Report submitted successfully"
    assert re.match(r"^RPT-[A-Z0-9]{8}$", body["refid"])
    assert body["report"]["refid"] == body["refid"]
    assert body["report"]["image"] is None
    assert body["report"]["name"] == "Asha"
    assert body["report"]["time"]


def test_submit_report_with_image_and_fetch_it(client):
    response = client.post(
        "/report",
        data=VALID_FIELDS,
        files={"image": ("pothole.jpg", b"\xff\xd8jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 201
    image_path = response.json()["report"]["image"]
    assert re.match(r"^/uploads/\d+\.jpg$", image_path)

    served = client.get(image_path)
    assert served.status_code == 200
    assert served.content == b"\xff\xd8jpeg-bytes"


def test_missing_field_returns_400_and_stores_nothing(client):
    fields = {k: v for k, v in VALID_FIELDS.items() if k != "location"}
    response = client.post("/report", data=fields)

    assert response.status_code == 400
    assert response.json() == {"msg": "Please fill all fields"}
    assert client.get("/reports").json() == []


def test_empty_field_returns_400(client):
    response = client.post("/report", data={**VALID_FIELDS, "type": ""})
    assert response.status_code == 400
    assert response.json() == {"msg": "Please fill all fields"}


def test_rejected_upload_is_not_kept(client, test_settings):
    response = client.post(
        "/report",
        data={"name": "Asha"},
        files={"image": ("pothole.jpg", b"bytes", "image/jpeg")},
    )
    assert response.status_code == 400
    assert os.listdir(test_settings.UPLOAD_DIR) == []


def test_client_refid_is_ignored(client):
    response = client.post("/report", data={**VALID_FIELDS, "refid": "RPT-CHOSEN00"})
    assert response.status_code == 201
    assert response.json()["refid"] != "RPT-CHOSEN00"


def test_list_reports_returns_all_submissions(client):
    submitted = {}
    for i in range(3):
        fields = {**VALID_FIELDS, "description": f"issue {i}"}
        refid = client.post("/report", data=fields).json()["refid"]
        submitted[refid] = fields

    response = client.get("/reports")
    assert response.status_code == 200
    reports = response.json()
    assert len(reports) == 3
    for report in reports:
        fields = submitted[report["refid"]]
        for key, value in fields.items():
            assert report[key] == value


def test_refid_conflict_returns_500(client, app):
    current = app.state.report_service
    app.state.report_service = ReportService(
        current.store, current.uploads, refid_factory=lambda: "RPT-SAMESAME"
    )

    assert client.post("/report", data=VALID_FIELDS).status_code == 201
    response = client.post("/report", data=VALID_FIELDS)

    assert response.status_code == 500
    assert "RPT-SAMESAME" in response.json()["error"]
    assert len(client.get("/reports").json()) == 1


def test_database_failure_returns_500(client, app):
    def unavailable():
        raise RuntimeError("Firestore not initialized and initialization failed")

    current = app.state.report_service
    app.state.report_service = ReportService(FirestoreReportStore(unavailable), current.uploads)

    listed = client.get("/reports")
    assert listed.status_code == 500
    assert "Firestore not initialized" in listed.json()["error"]

    submitted = client.post("/report", data=VALID_FIELDS)
    assert submitted.status_code == 500
    assert "error" in submitted.json()


def test_missing_upload_is_404(client):
    assert client.get("/uploads/does-not-exist.jpg").status_code == 404


def test_reports_persist_across_restart(test_settings):
    from fastapi.testclient import TestClient
    from app.main import create_app

    with TestClient(create_app(test_settings)) as first:
        refid = first.post("/report", data=VALID_FIELDS).json()["refid"]

    with TestClient(create_app(test_settings)) as second:
        assert [r["refid"] for r in second.get("/reports").json()] == [refid]


def test_submit_report_as_json(client):
    response = client.post("/report", json=VALID_FIELDS)

    assert response.status_code == 201
    body = response.json()
    assert re.match(r"^RPT-[A-Z0-9]{8}$", body["refid"])
    assert body["report"]["image"] is None
    assert body["report"]["location"] == "Main St & 3rd"
    assert [r["refid"] for r in client.get("/reports").json()] == [body["refid"]]


def test_json_numbers_are_stored_as_text(client):
    response = client.post("/report", json={**VALID_FIELDS, "mobile": 9999999999})
    assert response.status_code == 201
    assert response.json()["report"]["mobile"] == "9999999999"


def test_json_missing_field_returns_400(client):
    fields = {k: v for k, v in VALID_FIELDS.items() if k != "description"}
    response = client.post("/report", json=fields)

    assert response.status_code == 400
    assert response.json() == {"msg": "Please fill all fields"}
    assert client.get("/reports").json() == []


def test_unreadable_json_returns_400(client):
    response = client.post(
        "/report",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"msg": "Please fill all fields"}

    listed = client.post("/report", json=[VALID_FIELDS])
    assert listed.status_code == 400
