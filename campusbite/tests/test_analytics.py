from __future__ import annotations

from fastapi.testclient import TestClient

from campusbite.analytics.aggregator import compute_analytics
from campusbite.analytics.store import (
    clear_events,
    get_event_totals,
    get_events,
    record_event,
)
from campusbite.app import app
from campusbite.storage import store

client = TestClient(app)


def test_analytics_returns_empty_initially():
    clear_events()
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_requests"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["top_recommended_stalls"] == []


def test_analytics_tracks_recommendation_requests():
    clear_events()
    store.reset_store()
    client.get("/api/recommendations/user-1")
    client.get("/api/recommendations/user-1")
    body = client.get("/analytics").json()
    assert body["total_requests"] == 2
    assert body["confidence_distribution"]["high"] == 2
    assert body["top_recommended_stalls"][0]["count"] == 2


def test_unknown_user_is_not_recorded():
    clear_events()
    client.get("/api/recommendations/nobody")
    assert get_events("recommendation") == []


def test_compute_analytics_aggregates_events():
    clear_events()
    record_event("recommendation", {
        "confidence": "high", "results_returned": 4,
        "top_stall_id": "stall-1", "response_time_ms": 2.0,
    })
    record_event("recommendation", {
        "confidence": "low", "results_returned": 0,
        "top_stall_id": None, "response_time_ms": 4.0,
    })
    record_event("other", {"response_time_ms": 100.0})

    report = compute_analytics(get_events())
    assert report["total_requests"] == 2
    assert report["avg_response_time_ms"] == 3.0
    assert report["confidence_distribution"] == {"high": 1, "medium": 0, "low": 1}
    assert report["avg_results_returned"] == 2.0
    assert report["empty_result_rate"] == 50.0
    assert report["top_recommended_stalls"] == [{"stall_id": "stall-1", "count": 1}]


def test_events_carry_filter_and_distance_details():
    clear_events()
    store.reset_store()
    results = client.get("/api/recommendations/user-1").json()
    (event,) = get_events("recommendation")
    assert event["total_stalls"] == 17
    assert event["results_returned"] == len(results)
    # Curry House's wait and all of West Canteen are filtered out
    assert event["dropped_stalls"] >= 4
    assert event["dropped_stalls"] == 17 - len(results)
    assert event["unknown_distance"] == 0
    assert 0 <= event["avg_distance_m"] <= 500
    assert event["top_score"] == round(results[0]["score"], 4)


def test_compute_analytics_filter_and_distance_summary():
    clear_events()
    record_event("recommendation", {
        "results_returned": 3, "dropped_stalls": 5, "unknown_distance": 1,
        "avg_distance_m": 100.0, "top_score": 0.8,
    })
    record_event("recommendation", {
        "results_returned": 0, "dropped_stalls": 9, "unknown_distance": 0,
        "avg_distance_m": None, "top_score": None,
    })
    report = compute_analytics(get_events())
    assert report["avg_dropped_stalls"] == 7.0
    assert report["unknown_distance_results"] == 1
    assert report["avg_distance_m"] == 100.0
    assert report["avg_top_score"] == 0.8


def test_get_events_since_and_totals():
    clear_events()
    record_event("recommendation", {"results_returned": 1})
    record_event("recommendation", {"results_returned": 2})
    first, last = get_events()

    assert len(get_events(since=first["timestamp"])) == 2
    assert get_events(since=last["timestamp"] + 1) == []
    assert get_event_totals() == {"recommendation": 2}


def test_analytics_endpoint_reports_totals():
    clear_events()
    store.reset_store()
    client.get("/api/recommendations/user-1")
    body = client.get("/analytics").json()
    assert body["event_totals"] == {"recommendation": 1}
    assert body["avg_dropped_stalls"] > 0
    future = client.get("/analytics", params={"since": 4_000_000_000}).json()
    assert future["total_requests"] == 0
    assert future["event_totals"] == {"recommendation": 1}
