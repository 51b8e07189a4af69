from datetime import datetime, timedelta

from starlette.testclient import TestClient

from app.reporting.retention import previous_month


def test_list_approvals_paginates_with_headers(client: TestClient, add_approval):
    base = datetime(2026, 10, 1, 8, 0)
    for i in range(120):
        add_approval(base + timedelta(minutes=i))

    response = client.get("/api/approvals", params={"page": 2, "limit": 50})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 50
    assert response.headers["X-Total-Count"] == "120"
    assert response.headers["X-Total-Pages"] == "3"
    assert response.headers["Cache-Control"] == "no-store"
    # rows 51-100 of the newest-first ordering
    assert body[0]["created_at"] == (base + timedelta(minutes=69)).isoformat()
    assert body[-1]["created_at"] == (base + timedelta(minutes=20)).isoformat()


def test_list_approvals_shapes_rows(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 2, 10, 0), revenue=None, country="", adset_name="")

    row = client.get("/api/approvals").json()[0]

    assert row["revenue"] is None
    assert row["country"] is None
    assert row["adset_name"] is None
    assert row["campaign_name"] == "[AB12] Summer Sale"
    assert row["created_at"] == "2026-10-02T10:00:00"


def test_list_approvals_filters_by_inclusive_range(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 1, 0, 0))
    add_approval(datetime(2026, 10, 3, 23, 59, 59))
    add_approval(datetime(2026, 10, 4, 0, 0))

    response = client.get(
        "/api/approvals", params={"start_date": "2026-10-01", "end_date": "2026-10-03"}
    )

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert response.headers["X-Total-Count"] == "2"


def test_limit_above_maximum_is_clamped(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 1, 0, 0))
    response = client.get("/api/approvals", params={"limit": 5000})
    assert response.status_code == 200
    assert response.headers["X-Total-Pages"] == "1"


def test_fetch_all_reports_single_page(client: TestClient, add_approval):
    for i in range(3):
        add_approval(datetime(2026, 10, 1, i, 0))
    response = client.get("/api/approvals", params={"fetch_all": "true", "limit": 1})
    assert len(response.json()) == 3
    assert response.headers["X-Total-Pages"] == "1"


def test_malformed_date_is_rejected_before_query(client: TestClient):
    response = client.get(
        "/api/approvals", params={"start_date": "2026-13-01", "end_date": "2026-10-03"}
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["param"] == "start_date"


def test_page_below_one_is_rejected(client: TestClient):
    assert client.get("/api/approvals", params={"page": 0}).status_code == 422


def test_report_filters_sorts_and_aggregates(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 1, 9, 0), campaign_name="[AA1] one", revenue=5, country="AF")
    add_approval(datetime(2026, 10, 2, 9, 0), campaign_name="[BB2] two", revenue=20, country="AL")
    add_approval(datetime(2026, 10, 2, 10, 0), campaign_name="[AA1] three", revenue=None, country="ZZ")
    add_approval(datetime(2026, 10, 9, 9, 0), campaign_name="[CC3] outside", revenue=99)

    response = client.get(
        "/api/approvals/report",
        params={
            "mode": "range",
            "start_date": "2026-10-01",
            "end_date": "2026-10-03",
            "sort": "revenue",
            "direction": "desc",
        },
    )

    assert response.status_code == 200
    report = response.json()
    assert report["total"] == 3
    assert report["label"] == "3 апрува"
    assert [item["revenue"] for item in report["items"]] == [20.0, 5.0, None]
    assert report["top_buyers_count"][0] == {"label": "AA1", "value": 2}
    assert report["top_buyers_revenue"][0] == {"label": "BB2", "value": 20.0}
    assert [p["count"] for p in report["daily"]] == [1, 2, 0]
    assert report["pages"] == [1]


def test_report_search_matches_derived_country(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 1, 9, 0), country="AF")
    add_approval(datetime(2026, 10, 1, 9, 0), country="AL")

    report = client.get(
        "/api/approvals/report",
        params={"mode": "single_day", "day": "2026-10-01", "search": "албан"},
    ).json()

    assert report["total"] == 1
    assert report["items"][0]["country"] == "AL"


def test_report_rejects_bad_day(client: TestClient):
    response = client.get("/api/approvals/report", params={"mode": "single_day", "day": "nope"})
    assert response.status_code == 400


def test_export_returns_csv_attachment(client: TestClient, add_approval):
    add_approval(datetime(2026, 10, 1, 9, 30), revenue=12.5)
    add_approval(datetime(2026, 10, 2, 9, 30), revenue=None)

    response = client.get(
        "/api/approvals/export",
        params={"start_date": "2026-10-01", "end_date": "2026-10-31", "sort": "created_at"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=\"approvals_" in response.headers["content-disposition"]
    lines = response.text.split("\n")
    assert len(lines) == 3
    assert lines[1].endswith(",12.50,sub-1,2026-10-01 09:30")
    assert lines[2].endswith(",—,sub-1,2026-10-02 09:30")


def test_purge_invalidates_cached_report(client: TestClient, add_approval):
    first, last = previous_month()
    add_approval(datetime.combine(first, datetime.min.time()))
    add_approval(datetime.combine(last, datetime.max.time()).replace(microsecond=0))
    params = {"start_date": first.isoformat(), "end_date": last.isoformat()}

    assert client.get("/api/approvals/report", params=params).json()["total"] == 2

    purge = client.delete("/api/approvals/older-than-six-months")
    assert purge.status_code == 200
    assert purge.json()["deleted"] == 2

    assert client.get("/api/approvals/report", params=params).json()["total"] == 0
    assert client.delete("/api/approvals/older-than-six-months").json()["deleted"] == 0


def test_purge_keeps_current_month(client: TestClient, add_approval):
    first, _ = previous_month()
    this_month = (first + timedelta(days=40)).replace(day=1)
    add_approval(datetime.combine(this_month, datetime.min.time()))

    assert client.delete("/api/approvals/older-than-six-months").json()["deleted"] == 0
    assert client.get("/api/approvals").headers["X-Total-Count"] == "1"


def test_report_reflects_rows_ingested_after_caching(client: TestClient, add_approval):
    params = {"mode": "range", "start_date": "2026-10-01", "end_date": "2026-10-31"}
    add_approval(datetime(2026, 10, 5, 9, 0))

    first = client.get("/api/approvals/report", params=params).json()
    add_approval(datetime(2026, 10, 6, 9, 0))
    second = client.get("/api/approvals/report", params=params).json()

    assert first["total"] == 1
    assert second["total"] == 2
    assert client.get("/api/approvals", params=params).headers["X-Total-Count"] == "2"
    assert [p["count"] for p in second["daily"]][4:6] == [1, 1]


def test_unchanged_rows_reuse_cached_report(client: TestClient, add_approval, fake_redis):
    params = {"mode": "range", "start_date": "2026-10-01", "end_date": "2026-10-31"}
    add_approval(datetime(2026, 10, 5, 9, 0))

    first = client.get("/api/approvals/report", params=params).json()
    second = client.get("/api/approvals/report", params=params).json()

    assert first == second
    assert len([k for k in fake_redis.store if k.startswith("cache:approvals:")]) == 1


def test_single_date_bound_is_validated_but_not_applied(client: TestClient, add_approval):
    add_approval(datetime(2026, 9, 5, 12, 0))
    add_approval(datetime(2026, 10, 5, 12, 0))

    only_start = client.get("/api/approvals", params={"start_date": "2026-10-01"})
    only_end = client.get("/api/approvals", params={"end_date": "2026-09-30"})
    bad_start = client.get("/api/approvals", params={"start_date": "2026-1-5"})

    assert only_start.headers["X-Total-Count"] == "2"
    assert only_end.headers["X-Total-Count"] == "2"
    assert bad_start.status_code == 400
