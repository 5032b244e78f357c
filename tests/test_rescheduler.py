"""Tests for the reminder due-set resolver and rescheduler."""

from datetime import timedelta

import pytest

from plantbuddy.plants.service import PlantService
from plantbuddy.reminders.rescheduler import process_due_reminders, next_fire_time
from plantbuddy.reminders.service import ReminderService

from conftest import NOW, insert_plant, insert_reminder


class RecordingDispatcher:
    def __init__(self, fail_for=None):
        self.sent = []
        self.fail_for = fail_for or set()

    async def send(self, notification):
        if notification.reminder_id in self.fail_for:
            raise RuntimeError("push gateway unavailable")
        self.sent.append(notification)


YESTERDAY = NOW - timedelta(days=1)


@pytest.mark.asyncio
async def test_recurring_reminder_advances_from_previous_next_at(db):
    plant_id = await insert_plant(db, name="Tomato")
    reminder_id = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=2)

    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    doc = await db.reminders.find_one({"_id": reminder_id})
    assert doc is not None
    assert doc["next_at"] == YESTERDAY + timedelta(days=2)
    assert [item.action for item in report.items] == ["advanced"]


@pytest.mark.asyncio
async def test_one_off_reminder_is_deleted(db):
    plant_id = await insert_plant(db)
    reminder_id = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=0)

    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    assert await db.reminders.find_one({"_id": reminder_id}) is None
    assert [item.action for item in report.items] == ["deleted"]


@pytest.mark.asyncio
async def test_late_tick_does_not_drift_the_cadence(db):
    plant_id = await insert_plant(db)
    prior = NOW - timedelta(days=10, hours=3)
    reminder_id = await insert_reminder(db, plant_id, prior, repeat_days=3)

    await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    doc = await db.reminders.find_one({"_id": reminder_id})
    assert doc["next_at"] == prior + timedelta(days=3)
    assert next_fire_time(prior, 3) == prior + timedelta(days=3)


@pytest.mark.asyncio
async def test_processed_reminder_is_not_due_again(db):
    plant_id = await insert_plant(db)
    await insert_reminder(db, plant_id, YESTERDAY, repeat_days=2)
    dispatcher = RecordingDispatcher()

    await process_due_reminders(now=NOW, dispatcher=dispatcher)
    second = await process_due_reminders(now=NOW, dispatcher=dispatcher)

    assert await ReminderService.find_due_reminders(NOW) == []
    assert second.items == []
    assert len(dispatcher.sent) == 1


@pytest.mark.asyncio
async def test_future_reminders_are_left_alone(db):
    plant_id = await insert_plant(db)
    reminder_id = await insert_reminder(db, plant_id, NOW + timedelta(hours=1), repeat_days=0)

    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    assert report.items == []
    assert await db.reminders.find_one({"_id": reminder_id}) is not None


@pytest.mark.asyncio
async def test_reminder_due_exactly_now_fires(db):
    plant_id = await insert_plant(db)
    await insert_reminder(db, plant_id, NOW, repeat_days=0)

    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    assert report.succeeded == 1


@pytest.mark.asyncio
async def test_notification_payload(db):
    plant_id = await insert_plant(db, name="Aloe")
    await insert_reminder(db, plant_id, YESTERDAY, kind="nutrient", note="half strength")
    dispatcher = RecordingDispatcher()

    await process_due_reminders(now=NOW, dispatcher=dispatcher)

    [notification] = dispatcher.sent
    assert notification.plant_name == "Aloe"
    assert notification.kind == "nutrient"
    assert notification.note == "half strength"
    assert notification.plant_id == plant_id


@pytest.mark.asyncio
async def test_missing_plant_uses_placeholder_and_still_reschedules(db):
    reminder_id = await insert_reminder(db, "64b7f0c2a1b2c3d4e5f60718", YESTERDAY, repeat_days=1)
    dispatcher = RecordingDispatcher()

    report = await process_due_reminders(now=NOW, dispatcher=dispatcher)

    assert dispatcher.sent[0].plant_name == "Unknown"
    assert report.failed == 0
    doc = await db.reminders.find_one({"_id": reminder_id})
    assert doc["next_at"] == YESTERDAY + timedelta(days=1)


@pytest.mark.asyncio
async def test_malformed_plant_reference_uses_placeholder(db):
    reminder_id = await insert_reminder(db, "not-an-id", YESTERDAY, repeat_days=0)
    dispatcher = RecordingDispatcher()

    await process_due_reminders(now=NOW, dispatcher=dispatcher)

    assert dispatcher.sent[0].plant_name == "Unknown"
    assert await db.reminders.find_one({"_id": reminder_id}) is None


@pytest.mark.asyncio
async def test_plant_lookup_error_does_not_fail_reminder(db, monkeypatch):
    reminder_id = await insert_reminder(db, "64b7f0c2a1b2c3d4e5f60718", YESTERDAY, repeat_days=0)

    async def broken_lookup(plant_id):
        raise ConnectionError("plants collection unavailable")

    monkeypatch.setattr(PlantService, "find_plant", broken_lookup)
    dispatcher = RecordingDispatcher()

    report = await process_due_reminders(now=NOW, dispatcher=dispatcher)

    assert report.failed == 0
    assert dispatcher.sent[0].plant_name == "Unknown"
    assert await db.reminders.find_one({"_id": reminder_id}) is None


@pytest.mark.asyncio
async def test_one_failing_reminder_does_not_stop_the_others(db):
    plant_id = await insert_plant(db)
    bad_id = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=2)
    good_once = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=0)
    good_repeat = await insert_reminder(db, plant_id, YESTERDAY - timedelta(hours=2), repeat_days=7)
    dispatcher = RecordingDispatcher(fail_for={str(bad_id)})

    report = await process_due_reminders(now=NOW, dispatcher=dispatcher)

    assert report.failed == 1
    assert report.succeeded == 2
    failed = [item for item in report.items if not item.ok]
    assert failed[0].item_id == str(bad_id)
    assert "push gateway unavailable" in failed[0].error

    # The failed reminder is untouched and stays due for the next tick
    bad = await db.reminders.find_one({"_id": bad_id})
    assert bad["next_at"] == YESTERDAY
    assert await db.reminders.find_one({"_id": good_once}) is None
    repeat = await db.reminders.find_one({"_id": good_repeat})
    assert repeat["next_at"] == YESTERDAY - timedelta(hours=2) + timedelta(days=7)


@pytest.mark.asyncio
async def test_persistence_error_is_isolated(db, monkeypatch):
    plant_id = await insert_plant(db)
    await insert_reminder(db, plant_id, YESTERDAY, repeat_days=1)
    once_id = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=0)

    async def failing_advance(*args, **kwargs):
        raise TimeoutError("write timed out")

    monkeypatch.setattr(ReminderService, "advance_reminder", failing_advance)

    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    assert report.failed == 1
    assert await db.reminders.find_one({"_id": once_id}) is None


@pytest.mark.asyncio
async def test_reminder_moved_by_another_run_is_skipped(db):
    plant_id = await insert_plant(db)
    reminder_id = await insert_reminder(db, plant_id, YESTERDAY, repeat_days=2)

    # Another run already advanced it; a stale compare-and-set must not apply
    await ReminderService.advance_reminder(reminder_id, YESTERDAY + timedelta(days=2))
    updated = await ReminderService.advance_reminder(
        reminder_id, YESTERDAY + timedelta(days=2), expected_next_at=YESTERDAY
    )
    deleted = await ReminderService.delete_reminder(reminder_id, expected_next_at=YESTERDAY)

    assert updated is False
    assert deleted is False
    doc = await db.reminders.find_one({"_id": reminder_id})
    assert doc["next_at"] == YESTERDAY + timedelta(days=2)


@pytest.mark.asyncio
async def test_empty_due_set_returns_finished_report(db):
    report = await process_due_reminders(now=NOW, dispatcher=RecordingDispatcher())

    assert report.job == "reminders"
    assert report.items == []
    assert report.finished_at is not None
