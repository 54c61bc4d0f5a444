"""
Unit tests for the alert bus and bell.
"""

from datetime import datetime, timezone

from fleet_backoffice.app.schemas.alert import AlertResponse
from fleet_backoffice.app.services.alert_feed import (
    AlertBell, AlertEventBus, AlertChangeType, AlertChangeEvent
)


def make_alert(alert_id, active=True, priority="Média"):
    return AlertResponse(
        id=alert_id,
        alert_type="Comportamento",
        priority=priority,
        description=f"Alerta número {alert_id}",
        vehicle_plate=None,
        driver="Ana Souza",
        reference_id=None,
        active=active,
        created_at=datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc),
    )


def event(change_type, alert):
    return AlertChangeEvent(change_type=change_type, alert=alert)


def loaded_bell(*alerts):
    bell = AlertBell()
    bell.load(list(alerts))
    return bell


def test_load_keeps_only_active():
    bell = loaded_bell(make_alert(2), make_alert(1, active=False))

    assert bell.unread_count == 1
    assert [a.id for a in bell.snapshot()] == [2]


def test_insert_prepends_active_alert():
    bell = loaded_bell(make_alert(1))

    bell.apply(event(AlertChangeType.INSERT, make_alert(2)))

    assert [a.id for a in bell.snapshot()] == [2, 1]
    assert bell.unread_count == 2


def test_insert_inactive_is_ignored():
    bell = loaded_bell(make_alert(1))

    bell.apply(event(AlertChangeType.INSERT, make_alert(2, active=False)))

    assert bell.unread_count == 1


def test_update_replaces_then_drops_inactive():
    bell = loaded_bell(make_alert(2), make_alert(1))

    bell.apply(event(AlertChangeType.UPDATE, make_alert(1, priority="Alta")))
    assert bell.snapshot()[1].priority == "Alta"

    bell.apply(event(AlertChangeType.UPDATE, make_alert(2, active=False)))
    assert [a.id for a in bell.snapshot()] == [1]


def test_update_of_unknown_alert_is_not_added():
    bell = loaded_bell(make_alert(1))

    bell.apply(event(AlertChangeType.UPDATE, make_alert(7)))

    assert [a.id for a in bell.snapshot()] == [1]


def test_delete_removes_alert():
    bell = loaded_bell(make_alert(2), make_alert(1))

    bell.apply(event(AlertChangeType.DELETE, make_alert(2)))

    assert [a.id for a in bell.snapshot()] == [1]
    assert bell.unread_count == 1


def test_events_before_load_are_ignored():
    bell = AlertBell()

    bell.apply(event(AlertChangeType.INSERT, make_alert(1)))

    assert bell.unread_count == 0
    assert bell.loaded is False


def test_bus_fans_out_to_listeners():
    bus = AlertEventBus()
    received = []
    bus.add_listener(received.append)
    bus.add_listener(received.append)

    published = bus.publish(AlertChangeType.INSERT, make_alert(3))

    assert received == [published]
    assert published.alert.id == 3

    bus.remove_listener(received.append)
    bus.publish(AlertChangeType.DELETE, make_alert(3))
    assert len(received) == 1
