"""HTTP tests: submit receipts, read points back, error responses, audit trail."""

import json

import pytest

from app import create_app
from receipt_processor.config import Settings
from src.store import ScoreStore


@pytest.fixture
def settings(tmp_path):
    return Settings(log_dir=tmp_path)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    return app.test_client()


def _submit(client, receipt):
    resp = client.post("/receipts/process", json=receipt)
    assert resp.status_code == 200
    return resp.get_json()["id"]


def test_process_then_points(client, target_receipt):
    receipt_id = _submit(client, target_receipt)
    resp = client.get(f"/receipts/{receipt_id}/points")
    assert resp.status_code == 200
    assert resp.get_json() == {"points": 28}


def test_process_response_has_only_id(client, mm_receipt):
    resp = client.post("/receipts/process", json=mm_receipt)
    assert set(resp.get_json()) == {"id"}


def test_same_receipt_twice_gets_distinct_ids(client, mm_receipt):
    first = _submit(client, mm_receipt)
    second = _submit(client, mm_receipt)
    assert first != second
    assert client.get(f"/receipts/{first}/points").get_json() == {"points": 109}
    assert client.get(f"/receipts/{second}/points").get_json() == {"points": 109}


def test_unknown_id_is_404(client):
    resp = client.get("/receipts/00000000-0000-4000-8000-000000000000/points")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "No receipt found for that ID."}


def test_invalid_json_is_400_and_not_stored(tmp_path):
    store = ScoreStore()
    client = create_app(Settings(log_dir=tmp_path), store=store).test_client()
    resp = client.post("/receipts/process", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid JSON payload"}
    assert len(store) == 0


def test_body_without_json_content_type_is_accepted(client, target_receipt):
    resp = client.post("/receipts/process", data=json.dumps(target_receipt), content_type="text/plain")
    assert resp.status_code == 200
    assert "id" in resp.get_json()


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r.pop("retailer"),
        lambda r: r.pop("items"),
        lambda r: r.update(total=35.35),
        lambda r: r.update(items="none"),
        lambda r: r["items"][0].pop("price"),
    ],
)
def test_shape_mismatch_is_400(tmp_path, target_receipt, mutate):
    store = ScoreStore()
    client = create_app(Settings(log_dir=tmp_path), store=store).test_client()
    mutate(target_receipt)
    resp = client.post("/receipts/process", json=target_receipt)
    assert resp.status_code == 400
    assert "detail" in resp.get_json()
    assert len(store) == 0


def test_non_object_payload_is_400(client):
    resp = client.post("/receipts/process", json=[1, 2, 3])
    assert resp.status_code == 400


def test_unparseable_time_still_gets_id_with_zero_points(client, mm_receipt):
    mm_receipt["purchaseTime"] = "2:33 PM"
    receipt_id = _submit(client, mm_receipt)
    assert client.get(f"/receipts/{receipt_id}/points").get_json() == {"points": 0}


def test_generated_by_llm_setting_reaches_engine(tmp_path, mm_receipt):
    client = create_app(Settings(log_dir=tmp_path, generated_by_llm=True)).test_client()
    receipt_id = _submit(client, mm_receipt)
    assert client.get(f"/receipts/{receipt_id}/points").get_json() == {"points": 114}


def test_health_counts_receipts(client, target_receipt):
    assert client.get("/health").get_json() == {"status": "ok", "receipts": 0}
    _submit(client, target_receipt)
    assert client.get("/health").get_json() == {"status": "ok", "receipts": 1}


def test_audit_log_entries(client, settings, target_receipt):
    receipt_id = _submit(client, target_receipt)
    client.get(f"/receipts/{receipt_id}/points")
    client.get("/receipts/missing/points")
    client.post("/receipts/process", json={"retailer": "x"})

    lines = (settings.log_dir / "audit.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    assert [(e["action"], e["status"]) for e in entries] == [
        ("process", "success"),
        ("points", "success"),
        ("points", "not_found"),
        ("process", "error"),
    ]
    assert entries[0]["receipt_id"] == receipt_id
    assert entries[0]["points"] == 28
    assert entries[0]["num_items"] == 5
    assert entries[0]["timestamp"].endswith("Z")


def test_audit_can_be_disabled(tmp_path, target_receipt):
    client = create_app(Settings(log_dir=tmp_path, audit_enabled=False)).test_client()
    _submit(client, target_receipt)
    assert not (tmp_path / "audit.log").exists()


def test_injected_store_receives_records(tmp_path, target_receipt):
    store = ScoreStore()
    client = create_app(Settings(log_dir=tmp_path), store=store).test_client()
    receipt_id = _submit(client, target_receipt)
    assert store.get(receipt_id) == 28


@pytest.mark.parametrize("price", ["1e999999999", "1e5000"])
def test_huge_price_still_returns_id(tmp_path, mm_receipt, price):
    store = ScoreStore()
    client = create_app(Settings(log_dir=tmp_path), store=store).test_client()
    mm_receipt["items"][0] = {"shortDescription": "abc", "price": price}
    receipt_id = _submit(client, mm_receipt)
    assert len(store) == 1
    assert client.get(f"/receipts/{receipt_id}/points").get_json() == {"points": 109}


def test_audit_write_failure_still_returns_id(tmp_path, target_receipt):
    # a directory where the audit file should be makes every audit write fail
    (tmp_path / "audit.log").mkdir()
    store = ScoreStore()
    client = create_app(Settings(log_dir=tmp_path), store=store).test_client()
    receipt_id = _submit(client, target_receipt)
    assert store.get(receipt_id) == 28
    resp = client.get(f"/receipts/{receipt_id}/points")
    assert resp.status_code == 200
    assert resp.get_json() == {"points": 28}
