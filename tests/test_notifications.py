import logging
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from expense_tracker.models.enums import NotificationPriority, NotificationType
from expense_tracker.routes.notifications import report_visibility
from expense_tracker.schemas.notifications import VisibilitySchema
from expense_tracker.services.errors import NetworkError
from expense_tracker.services.notifications import BackgroundLimitChecker
from expense_tracker.settings.notifications import NotificationSettings


def limit_alerts(hub, user_id):
    return [n for n in hub.for_user(user_id).notifications if n.is_limit_notification]


def titles(hub, user_id):
    return [n.title for n in hub.for_user(user_id).notifications]


@pytest.mark.asyncio
async def test_expense_over_limit_raises_one_alert(notifier, tracker, store, hub, user_id):
    await tracker.set_limit(user_id, 1000)
    store.add(user_id, "Groceries", -400)
    await notifier.check_limits(user_id)
    assert limit_alerts(hub, user_id) == []

    dinner = store.add(user_id, "Dinner", -700)
    await notifier.transaction_added(user_id, dinner)

    (alert,) = limit_alerts(hub, user_id)
    assert alert.type == NotificationType.ERROR
    assert alert.title == "Budget Exceeded"
    assert alert.priority == NotificationPriority.HIGH
    assert not alert.auto_close

    assert await notifier.recheck(user_id)
    assert await notifier.recheck(user_id)
    assert len(limit_alerts(hub, user_id)) == 1


@pytest.mark.asyncio
async def test_warning_alert_is_replaced_when_limit_is_exceeded(
    notifier, tracker, store, hub, user_id
):
    await tracker.set_limit(user_id, 1000)
    await notifier.transaction_added(user_id, store.add(user_id, "Shopping", -850))
    assert [n.title for n in limit_alerts(hub, user_id)] == ["Budget Alert"]

    await notifier.transaction_added(user_id, store.add(user_id, "Shopping", -300))
    assert [n.title for n in limit_alerts(hub, user_id)] == ["Budget Exceeded"]


@pytest.mark.asyncio
async def test_expense_notification(notifier, hub, store, scheduler, user_id):
    await notifier.transaction_added(user_id, store.add(user_id, "Lunch", -1250.5))

    (notification,) = hub.for_user(user_id).notifications
    assert notification.type == NotificationType.INFO
    assert notification.title == "Expense Added"
    assert notification.message == "Lunch: ₹1,250.50"
    assert notification.duration_ms == 2000
    assert notification.auto_close
    assert len(scheduler.jobs) == 1


@pytest.mark.asyncio
async def test_income_does_not_recheck_limits(notifier, tracker, store, hub, user_id):
    await tracker.set_limit(user_id, 100)
    store.add(user_id, "Rent", -500)

    await notifier.transaction_added(user_id, store.add(user_id, "Salary", 3000))

    assert titles(hub, user_id) == ["Income Added"]
    assert hub.for_user(user_id).notifications[0].type == NotificationType.SUCCESS


@pytest.mark.asyncio
async def test_deleting_an_expense_clears_the_alert(notifier, tracker, store, hub, user_id):
    await tracker.set_limit(user_id, 1000)
    store.add(user_id, "Groceries", -600)
    laptop = store.add(user_id, "Laptop", -900)
    await notifier.check_limits(user_id)
    assert len(limit_alerts(hub, user_id)) == 1

    deleted = await store.delete(user_id, laptop.id)
    await notifier.transaction_deleted(user_id, deleted)

    assert limit_alerts(hub, user_id) == []
    assert titles(hub, user_id) == ["Transaction Deleted"]
    assert hub.for_user(user_id).notifications[0].message == "Laptop: ₹900.00 removed"


@pytest.mark.asyncio
async def test_limit_set_notifies_and_rechecks(notifier, tracker, store, hub, user_id):
    store.add(user_id, "Groceries", -4500)
    limit = await tracker.set_limit(user_id, 5000)

    await notifier.limit_set(user_id, limit)

    assert titles(hub, user_id) == ["Limit Updated", "Budget Alert"]
    assert hub.for_user(user_id).notifications[0].message == (
        "Monthly expense limit set to ₹5,000"
    )


@pytest.mark.asyncio
async def test_limit_removed_clears_alerts(notifier, tracker, store, hub, user_id):
    await tracker.set_limit(user_id, 100)
    store.add(user_id, "Groceries", -500)
    await notifier.check_limits(user_id)

    await tracker.remove_limit(user_id)
    await notifier.limit_removed(user_id)

    assert titles(hub, user_id) == ["Limit Removed"]
    assert not await notifier.recheck(user_id)
    assert limit_alerts(hub, user_id) == []


@pytest.mark.asyncio
async def test_failed_recheck_is_logged(notifier, store, hub, user_id, caplog):
    store.fail_with = NetworkError()

    with pytest.raises(NetworkError):
        await notifier.check_limits(user_id)

    with caplog.at_level(logging.ERROR):
        assert not await notifier.recheck(user_id)
    assert "Limit recheck failed" in caplog.text


@pytest.mark.asyncio
async def test_background_checker_rechecks_open_sessions(notifier, tracker, store, hub):
    over, under = uuid.uuid4(), uuid.uuid4()
    for user_id, spent in ((over, -1500), (under, -100)):
        await tracker.set_limit(user_id, 1000)
        store.add(user_id, "Groceries", spent, datetime(2026, 10, 1, tzinfo=timezone.utc))
        hub.for_user(user_id)
    closed_session = uuid.uuid4()
    await tracker.set_limit(closed_session, 10)
    store.add(closed_session, "Groceries", -100)

    checker = BackgroundLimitChecker(hub, notifier, NotificationSettings())
    await checker()
    await checker()

    assert [n.title for n in limit_alerts(hub, over)] == ["Budget Exceeded"]
    assert limit_alerts(hub, under) == []
    assert closed_session not in hub.active_users()


@pytest.mark.asyncio
async def test_background_checker_without_sessions(notifier, hub):
    await BackgroundLimitChecker(hub, notifier, NotificationSettings())()
    assert hub.active_users() == []


@pytest.mark.asyncio
async def test_background_checker_evicts_idle_sessions(notifier, tracker, store, hub, clock):
    idle, busy = uuid.uuid4(), uuid.uuid4()
    await tracker.set_limit(idle, 10)
    store.add(idle, "Groceries", -100)
    checker = BackgroundLimitChecker(
        hub, notifier, NotificationSettings(session_idle_minutes=30)
    )
    hub.for_user(idle)
    hub.for_user(busy).subscribe(lambda _: None)

    await checker()
    assert len(limit_alerts(hub, idle)) == 1

    clock.advance(minutes=20)
    await checker()
    clock.advance(minutes=15)
    await checker()

    assert hub.active_users() == [busy]


@pytest.mark.asyncio
async def test_visibility_regained_rechecks_limits(notifier, tracker, store, hub, user_id):
    await tracker.set_limit(user_id, 1000)
    store.add(user_id, "Groceries", -1200)
    current_user = SimpleNamespace(id=user_id)

    hidden = await report_visibility(
        VisibilitySchema(visible=False), current_user=current_user, notifier=notifier
    )
    assert not hidden.alerted
    assert limit_alerts(hub, user_id) == []

    visible = await report_visibility(
        VisibilitySchema(visible=True), current_user=current_user, notifier=notifier
    )
    await report_visibility(
        VisibilitySchema(visible=True), current_user=current_user, notifier=notifier
    )

    assert visible.alerted
    assert [n.title for n in limit_alerts(hub, user_id)] == ["Budget Exceeded"]
