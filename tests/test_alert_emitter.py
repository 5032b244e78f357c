"""Tests for the alert emitter policy and alert queries."""

import pytest

from plantbuddy.alerts.emitter import AlertEmitter
from plantbuddy.alerts.models import AlertLevel
from plantbuddy.alerts.service import AlertService
from plantbuddy.weather.models import RiskEvaluation, WeatherSnapshot


def evaluation(level, message="High temperature 42°C: risk of heat stress"):
    return RiskEvaluation(
        title="Weather alert for Tomato",
        message=message,
        issues=[message] if level != AlertLevel.INFO else [],
        level=level,
        meta=WeatherSnapshot(temp_c=42, humidity=50, raw={"name": "Jaipur"}),
    )


def test_level_ordering():
    assert AlertLevel.highest(AlertLevel.INFO, AlertLevel.WARNING) == AlertLevel.WARNING
    assert AlertLevel.highest(AlertLevel.CRITICAL, AlertLevel.WARNING) == AlertLevel.CRITICAL
    assert AlertLevel.INFO.rank < AlertLevel.WARNING.rank < AlertLevel.CRITICAL.rank


def test_default_policy_persists_warning_and_critical_only():
    emitter = AlertEmitter(min_level="warning", dedupe_window_hours=0)

    assert not emitter.should_persist(AlertLevel.INFO)
    assert emitter.should_persist(AlertLevel.WARNING)
    assert emitter.should_persist(AlertLevel.CRITICAL)


@pytest.mark.asyncio
async def test_info_is_suppressed_by_default(db):
    emitter = AlertEmitter(min_level="warning", dedupe_window_hours=0)

    result = await emitter.emit("p1", evaluation(AlertLevel.INFO, "Current: clear, 22°C, humidity 60%"))

    assert result is None
    assert await db.alerts.count_documents({}) == 0


@pytest.mark.asyncio
async def test_info_is_persisted_when_policy_allows(db):
    emitter = AlertEmitter(min_level="info", dedupe_window_hours=0)

    result = await emitter.emit("p1", evaluation(AlertLevel.INFO, "Current: clear, 22°C, humidity 60%"))

    assert result["level"] == "info"
    assert await db.alerts.count_documents({}) == 1


@pytest.mark.asyncio
async def test_emitted_alert_embeds_weather_snapshot(db):
    emitter = AlertEmitter(min_level="warning", dedupe_window_hours=0)

    await emitter.emit("p1", evaluation(AlertLevel.CRITICAL))

    stored = await db.alerts.find_one({})
    assert stored["meta"]["temp_c"] == 42
    assert stored["meta"]["raw"] == {"name": "Jaipur"}
    assert stored["read"] is False


@pytest.mark.asyncio
async def test_identical_unread_alert_is_not_repeated(db):
    emitter = AlertEmitter(min_level="warning", dedupe_window_hours=6)

    first = await emitter.emit("p1", evaluation(AlertLevel.CRITICAL))
    second = await emitter.emit("p1", evaluation(AlertLevel.CRITICAL))
    other_plant = await emitter.emit("p2", evaluation(AlertLevel.CRITICAL))
    changed = await emitter.emit("p1", evaluation(AlertLevel.CRITICAL, "High temperature 43°C: risk of heat stress"))

    assert first is not None
    assert second is None
    assert other_plant is not None
    assert changed is not None
    assert await db.alerts.count_documents({}) == 3


@pytest.mark.asyncio
async def test_read_alert_does_not_block_a_new_one(db):
    emitter = AlertEmitter(min_level="warning", dedupe_window_hours=6)
    first = await emitter.emit("p1", evaluation(AlertLevel.CRITICAL))
    await AlertService.mark_as_read(str(first["_id"]))

    again = await emitter.emit("p1", evaluation(AlertLevel.CRITICAL))

    assert again is not None


@pytest.mark.asyncio
async def test_list_alerts_filters_and_counts(db):
    await AlertService.create_alert("p1", "a", "m1", AlertLevel.WARNING)
    second = await AlertService.create_alert("p1", "b", "m2", AlertLevel.CRITICAL)
    await AlertService.create_alert("p2", "c", "m3", AlertLevel.WARNING)
    await AlertService.mark_as_read(str(second["_id"]))

    everything, unread = await AlertService.list_alerts()
    p1_unread, p1_unread_count = await AlertService.list_alerts(plant_id="p1", unread_only=True)
    capped, _ = await AlertService.list_alerts(limit=2)

    assert len(everything) == 3
    assert unread == 2
    assert [a.title for a in p1_unread] == ["a"]
    assert p1_unread_count == 1
    assert len(capped) == 2
