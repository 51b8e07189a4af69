from datetime import date, datetime, timedelta, timezone

from sqlmodel import select

from app.models.reporting_models import Approval, Click
from app.reporting.retention import (
    previous_month,
    purge_previous_month_approvals,
    purge_yesterdays_clicks,
    yesterday,
)

MSK = timezone(timedelta(hours=3))


def test_yesterday_uses_fixed_offset():
    # 22:30 UTC on the 18th is already the 19th in UTC+3
    assert yesterday(datetime(2026, 10, 18, 22, 30, tzinfo=timezone.utc)) == date(2026, 10, 18)
    assert yesterday(datetime(2026, 10, 18, 20, 30, tzinfo=timezone.utc)) == date(2026, 10, 17)


def test_previous_month_bounds():
    assert previous_month(datetime(2026, 10, 1, 0, 0, tzinfo=MSK)) == (
        date(2026, 9, 1),
        date(2026, 9, 30),
    )
    assert previous_month(datetime(2026, 1, 15, tzinfo=MSK)) == (
        date(2025, 12, 1),
        date(2025, 12, 31),
    )
    assert previous_month(datetime(2028, 3, 3, tzinfo=MSK)) == (
        date(2028, 2, 1),
        date(2028, 2, 29),
    )


def test_purge_clicks_deletes_only_yesterday_and_is_idempotent(session, add_click):
    now = datetime(2026, 10, 19, 0, 0, tzinfo=MSK)
    add_click("c1", date(2026, 10, 18))
    add_click("c2", date(2026, 10, 18))
    add_click("c3", date(2026, 10, 17))
    add_click("c4", date(2026, 10, 19))

    first = purge_yesterdays_clicks(session, now=now)
    second = purge_yesterdays_clicks(session, now=now)

    assert first.deleted == 2
    assert second.deleted == 0
    remaining = {c.campaign_id for c in session.exec(select(Click)).all()}
    assert remaining == {"c3", "c4"}


def test_purge_clicks_with_nothing_to_delete(session):
    result = purge_yesterdays_clicks(session, now=datetime(2026, 10, 19, tzinfo=MSK))
    assert result.deleted == 0
    assert "2026-10-18" in result.message


def test_purge_approvals_deletes_previous_calendar_month(session, add_approval):
    now = datetime(2026, 10, 1, 0, 0, tzinfo=MSK)
    kept_before = add_approval(datetime(2026, 8, 31, 23, 59, 59))
    add_approval(datetime(2026, 9, 1, 0, 0, 0))
    add_approval(datetime(2026, 9, 15, 12, 0))
    add_approval(datetime(2026, 9, 30, 23, 59, 59))
    kept_after = add_approval(datetime(2026, 10, 1, 0, 0, 0))

    result = purge_previous_month_approvals(session, now=now)

    assert result.deleted == 3
    assert (result.start, result.end) == (date(2026, 9, 1), date(2026, 9, 30))
    remaining = {a.id for a in session.exec(select(Approval)).all()}
    assert remaining == {kept_before.id, kept_after.id}
    assert purge_previous_month_approvals(session, now=now).deleted == 0
