"""
Alert change feed and notification bell.

Alert endpoints publish an `AlertChangeEvent` on `alert_bus` after every
successful write. The process-wide `alert_bell` listens on the bus and keeps
the list of active alerts shown behind the header bell, newest first.

The bell is filled lazily from the database on first use; events that arrive
before that are ignored since the first load will read them back anyway.
"""

import enum
import logging
from typing import Callable, List, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backoffice.app.models.alert import Alert
from fleet_backoffice.app.schemas.alert import AlertResponse

logger = logging.getLogger("fleet.alerts")


class AlertChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AlertChangeEvent(BaseModel):
    """One alert row change. For DELETE, `alert` is the row as it was."""
    change_type: AlertChangeType
    alert: AlertResponse


AlertListener = Callable[[AlertChangeEvent], None]


class AlertEventBus:
    """Synchronous in-process fan-out of alert changes."""

    def __init__(self):
        self._listeners: List[AlertListener] = []

    def add_listener(self, listener: AlertListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: AlertListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, change_type: AlertChangeType, alert: Union[Alert, AlertResponse]) -> AlertChangeEvent:
        event = AlertChangeEvent(change_type=change_type, alert=AlertResponse.model_validate(alert))
        for listener in list(self._listeners):
            listener(event)
        return event


class AlertBell:
    """Active alerts behind the notification bell."""

    def __init__(self):
        self.alerts: List[AlertResponse] = []
        self.loaded = False

    def load(self, alerts: List[AlertResponse]):
        self.alerts = [alert for alert in alerts if alert.active]
        self.loaded = True

    def reset(self):
        self.alerts = []
        self.loaded = False

    @property
    def unread_count(self) -> int:
        return len(self.alerts)

    def apply(self, event: AlertChangeEvent):
        if not self.loaded:
            return

        alert = event.alert
        if event.change_type == AlertChangeType.INSERT:
            if alert.active:
                self.alerts.insert(0, alert)
                logger.info(
                    "New alert: %s - %s",
                    alert.alert_type,
                    alert.description,
                    extra={"alert_id": alert.id, "priority": alert.priority},
                )
        elif event.change_type == AlertChangeType.UPDATE:
            self.alerts = [alert if held.id == alert.id else held for held in self.alerts]
            self.alerts = [held for held in self.alerts if held.active]
        elif event.change_type == AlertChangeType.DELETE:
            self.alerts = [held for held in self.alerts if held.id != alert.id]

    def snapshot(self) -> List[AlertResponse]:
        return list(self.alerts)


alert_bus = AlertEventBus()
alert_bell = AlertBell()
alert_bus.add_listener(alert_bell.apply)


async def ensure_bell_loaded(db: AsyncSession) -> AlertBell:
    """Fill the bell from the database the first time it is read."""
    if not alert_bell.loaded:
        result = await db.execute(
            select(Alert)
            .where(Alert.active == True)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
        )
        alert_bell.load([AlertResponse.model_validate(row) for row in result.scalars().all()])
    return alert_bell
