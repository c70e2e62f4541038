"""
Test the catalog adapter and the REST endpoints against an in-memory
SQLite database.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base, get_db
from prediction.models import College
from prediction.routes import router
from prediction.logic.adapter import college_to_institution, fetch_catalog


SEED_COLLEGES = [
    dict(name="Grant Medical College", location="Maharashtra", type="Government",
         quota="All India Quota", cutoff_ranks={"General": 1200, "OBC": 1800},
         fees="₹45,000/year", seats=260),
    dict(name="Christian Medical College", location="Tamil Nadu", type="Private",
         quota="AllIndia", cutoff_ranks={"General": 500}, fees="₹6,50,000/year", seats=100),
    dict(name="Maulana Azad Medical College", location="Delhi", type="Government",
         quota="State Quota", cutoff_ranks={"General": 1200}, fees="₹30,000/year", seats=250),
    # unknown quota label: skipped by the adapter
    dict(name="Broken Row College", location="Delhi", type="Government",
         quota="Weird Quota", cutoff_ranks={"General": 1000}),
    # cutoffs stored as JSON text with a blank General entry
    dict(name="Sparse College", location="Kerala", type="Government",
         quota="State", cutoff_ranks='{"OBC": "3000", "General": ""}'),
]


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    db = TestingSession()
    db.add_all([College(**row) for row in SEED_COLLEGES])
    db.commit()
    db.close()

    yield TestingSession
    engine.dispose()


@pytest.fixture
def client(session_factory):
    app = FastAPI()
    app.include_router(router)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def _names(payload):
    return [r["name"] for r in payload["recommendations"]]


# =============================================================================
# ADAPTER
# =============================================================================

def test_college_to_institution_normalizes_row():
    row = College(
        id=1,
        name="  Govt Medical College  ",
        location="Kerala",
        type="govt",
        quota="nri",
        cutoff_ranks='{"general": 100, "sc": null}',
    )
    inst = college_to_institution(row)

    assert inst.name == "Govt Medical College"
    assert inst.type == "Government"
    assert inst.quota == "NRI Quota"
    assert inst.cutoff_for("General") == 100
    assert inst.cutoff_for("SC") is None


def test_unusable_cutoff_entries_are_dropped_one_by_one():
    row = College(
        id=2,
        name="Mixed Data College",
        location="Goa",
        cutoff_ranks={"General": 1000, "SC": "N/A", "OBC": "1000.9", "ST": 1500.0, "EWS": "1,200"},
    )
    inst = college_to_institution(row)

    assert inst.cutoff_for("General") == 1000
    assert inst.cutoff_for("ST") == 1500
    assert inst.cutoff_for("SC") is None
    assert inst.cutoff_for("OBC") is None
    assert inst.cutoff_for("EWS") is None


def test_fetch_catalog_keeps_college_with_one_bad_cutoff(session_factory):
    db = session_factory()
    try:
        db.add(College(
            name="Goa Medical College",
            location="Goa",
            type="Government",
            cutoff_ranks={"General": 9000, "SC": "N/A", "OBC": "1000.9"},
        ))
        db.commit()
        catalog = fetch_catalog(db, state_filter="Goa")
    finally:
        db.close()

    assert [i.name for i in catalog] == ["Goa Medical College"]
    assert catalog[0].cutoff_for("General") == 9000
    assert catalog[0].cutoff_for("SC") is None
    assert catalog[0].cutoff_for("OBC") is None


def test_fetch_catalog_skips_bad_rows_and_orders_by_name(session_factory):
    db = session_factory()
    try:
        catalog = fetch_catalog(db)
        delhi = fetch_catalog(db, state_filter="Delhi")
    finally:
        db.close()

    assert [i.name for i in catalog] == [
        "Christian Medical College",
        "Grant Medical College",
        "Maulana Azad Medical College",
        "Sparse College",
    ]
    assert [i.name for i in delhi] == ["Maulana Azad Medical College"]
    assert catalog[3].cutoff_for("OBC") == 3000
    assert catalog[3].cutoff_for("General") is None


# =============================================================================
# ENDPOINTS
# =============================================================================

def test_rank_endpoint(client):
    response = client.post("/predictions/rank", json={
        "scores": {"physics": 170, "chemistry": 170, "biology": 340},
        "category": "SC",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["expected_rank"] == 630
    assert body["min_rank"] == 504
    assert body["max_rank"] == 756
    assert body["total_score"] == 680
    assert body["outlook"] == {"label": "Excellent", "chance": 95}


def test_rank_endpoint_rejects_out_of_range_scores(client):
    response = client.post("/predictions/rank", json={
        "scores": {"physics": 200, "chemistry": 170, "biology": 340},
        "category": "General",
    })
    assert response.status_code == 422


def test_colleges_endpoint(client):
    response = client.post("/predictions/colleges", json={"rank": 900, "category": "General"})

    assert response.status_code == 200
    body = response.json()
    assert _names(body) == [
        "Christian Medical College",
        "Grant Medical College",
        "Maulana Azad Medical College",
    ]
    assert [r["admission_chance"] for r in body["recommendations"]] == [5, 85, 85]
    assert body["recommendations"][1]["chance_label"] == "High"
    assert body["groups"]["high_chance"] == ["Grant Medical College", "Maulana Azad Medical College"]
    assert body["rank_estimate"] is None
    assert body["outlook"] == {"label": "Excellent", "chance": 95}


def test_colleges_endpoint_sort_and_filters(client):
    by_chance = client.post("/predictions/colleges", json={
        "rank": 900, "category": "General", "sort_by": "chance",
    }).json()
    assert _names(by_chance) == [
        "Grant Medical College",
        "Maulana Azad Medical College",
        "Christian Medical College",
    ]

    obc = client.post("/predictions/colleges", json={"rank": 2000, "category": "OBC"}).json()
    assert _names(obc) == ["Grant Medical College", "Sparse College"]
    assert [r["admission_chance"] for r in obc["recommendations"]] == [35, 95]

    delhi = client.post("/predictions/colleges", json={
        "rank": 900, "category": "General", "state": "Delhi",
    }).json()
    assert _names(delhi) == ["Maulana Azad Medical College"]


def test_colleges_endpoint_rejects_unknown_quota(client):
    response = client.post("/predictions/colleges", json={
        "rank": 900, "category": "General", "quota": "Sports Quota",
    })
    assert response.status_code == 400


def test_colleges_endpoint_rejects_non_positive_rank(client):
    response = client.post("/predictions/colleges", json={"rank": 0, "category": "General"})
    assert response.status_code == 422


def test_full_prediction(client):
    response = client.post("/predictions", json={
        "scores": {"physics": 170, "chemistry": 170, "biology": 340},
        "category": "General",
        "home_state": "Delhi",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["rank_estimate"]["expected_rank"] == 900
    assert _names(body) == [
        "Christian Medical College",
        "Grant Medical College",
        "Maulana Azad Medical College",
    ]
    assert body["groups"]["home_state"] == ["Maulana Azad Medical College"]
    assert body["summary"]["total_evaluated"] == 4
    assert any(w.startswith("Low recommendation count") for w in body["warnings"])


def test_full_prediction_simple_format(client):
    response = client.post("/predictions", json={
        "scores": {"physics": 170, "chemistry": 170, "biology": 340},
        "category": "General",
        "format": "simple",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["outlook"]["label"] == "Excellent"
    assert body["rank_estimate"]["expected_rank"] == 900
    assert body["recommendations"][0]["quota"] == "All India Quota"


def test_catalog_stats(client):
    body = client.get("/predictions/catalog/stats").json()

    assert body["total"] == 4
    assert body["by_type"]["Government"] == 3
    assert body["by_type"]["Private"] == 1
    assert body["by_quota"]["All India Quota"] == 2
    assert body["by_quota"]["State Quota"] == 2


def test_health(client):
    assert client.get("/predictions/health").json() == {
        "status": "ok",
        "engine": "prediction",
        "version": "1.0.0",
    }
