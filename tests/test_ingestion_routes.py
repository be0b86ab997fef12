from fastapi.testclient import TestClient

from propinvest.api.endpoints import ingestion
from propinvest.core.config import settings

CSV_HEADERS = {"Content-Type": "text/csv"}


def _upload(client: TestClient, content, **params):
    return client.post("/api/v1/ingestion/csv", content=content, headers=CSV_HEADERS, params=params)


def test_ingest_csv_returns_batch_report(client: TestClient, sample_csv):
    response = _upload(client, sample_csv)
    assert response.status_code == 200

    data = response.json()
    assert data["rows_in"] == 4
    assert data["rows_out"] == 3
    assert data["error_count"] == 1
    assert data["errors"] == [{"row": 3, "reason": "Missing critical address information"}]
    assert data["column_mapping"]["address"] == "Property Address"
    assert data["summary"].startswith("TRANSFORMATION SUMMARY")
    assert [p["id"] for p in data["properties"]] == ["property-1", "property-2", "property-4"]
    assert data["properties"][1]["property_type"] == "Multi-family"


def test_ingest_with_delimiter_alias(client: TestClient):
    content = "address\tcity\tstate\tprice\n1 Main St\tAustin\tTX\t250000\n"
    response = _upload(client, content, delimiter="tab")

    assert response.status_code == 200
    assert response.json()["properties"][0]["price"] == 250000


def test_ingest_without_header_row(client: TestClient):
    response = _upload(client, "1 Main St,Austin,TX\n", has_header="false")

    assert response.status_code == 200
    data = response.json()
    assert data["rows_out"] == 0
    assert data["error_count"] == 1


def test_empty_upload_is_bad_request(client: TestClient):
    response = _upload(client, b"")

    assert response.status_code == 400
    assert response.json()["detail"]["error_code"] == "BAD_REQUEST"


def test_oversized_upload_rejected(client: TestClient, mocker):
    mocker.patch.object(settings, "MAX_UPLOAD_BYTES", 10)
    response = _upload(client, "address,city,state\n1 Main St,Austin,TX\n")

    assert response.status_code == 413
    assert response.json()["detail"]["error_code"] == "PAYLOAD_TOO_LARGE"


def test_last_ingestion_not_found_before_upload(client: TestClient):
    response = client.get("/api/v1/ingestion/last")
    assert response.status_code == 404


def test_last_ingestion_report(client: TestClient, sample_csv):
    _upload(client, sample_csv)
    _upload(client, b"")

    response = client.get("/api/v1/ingestion/last")
    assert response.status_code == 200
    assert response.json()["rows_out"] == 3


def test_new_upload_replaces_collection(client: TestClient, sample_csv):
    _upload(client, sample_csv)
    _upload(client, "address,city,state\n7 Pine Rd,Reno,NV\n")

    data = client.get("/api/v1/properties/").json()
    assert data["total"] == 1
    assert data["properties"][0]["city"] == "Reno"


def test_ingestion_runs_off_the_event_loop(client: TestClient, sample_csv, mocker):
    spy = mocker.patch.object(ingestion, "run_in_threadpool", wraps=ingestion.run_in_threadpool)
    response = _upload(client, sample_csv)

    assert response.status_code == 200
    assert spy.call_count == 1
    assert spy.call_args.args[0].__name__ == "ingest"
