# tests/test_notification_service.py

import pytest

from risklens.config import Settings
from risklens.infrastructure.log_notifier import LoggingNotificationGateway
from risklens.ports.notification_gateway import NotificationError, NotificationGateway
from risklens.services.notification_service import NotificationService


class FailingGateway(NotificationGateway):

    def send(self, notification):
        raise NotificationError("smtp unavailable")


@pytest.fixture
def gateway():
    return LoggingNotificationGateway()


def _service(gateway, **settings):
    settings.setdefault("critical_risk_threshold", 20)
    return NotificationService(gateway, Settings(**settings))


def test_critical_risk_sends_alert(gateway, make_risk):
    service = _service(gateway)
    risk = make_risk(title="Data center outage", likelihood=4, impact=5)
    assert service.on_risk_created(risk) is True
    (sent,) = gateway.sent
    assert sent.kind == "critical_risk"
    assert "Data center outage" in sent.title
    assert sent.metadata == {"risk_id": risk.id, "score": 20}


def test_below_threshold_is_silent(gateway, make_risk):
    service = _service(gateway)
    assert service.on_risk_created(make_risk(likelihood=4, impact=4)) is False
    assert gateway.sent == []


def test_threshold_is_configurable(gateway, make_risk):
    service = _service(gateway, critical_risk_threshold=9)
    assert service.on_risk_created(make_risk(likelihood=3, impact=3)) is True


def test_disabled_notifications(gateway, make_risk):
    service = _service(gateway, notifications_enabled=False)
    assert service.on_risk_created(make_risk(likelihood=5, impact=5)) is False
    assert service.on_escalated(make_risk()) is False
    assert gateway.sent == []


def test_escalation_sends_regardless_of_score(gateway, make_risk):
    service = _service(gateway)
    risk = make_risk(likelihood=1, impact=1)
    assert service.on_escalated(risk) is True
    assert gateway.sent[0].kind == "escalation"
    assert risk.id in gateway.sent[0].message


def test_delivery_failure_is_reported_not_raised(make_risk, caplog):
    service = _service(FailingGateway())
    assert service.on_risk_created(make_risk(likelihood=5, impact=5)) is False
    assert "smtp unavailable" in caplog.text


def test_gateway_history_is_bounded(make_risk):
    gateway = LoggingNotificationGateway(max_history=2)
    service = _service(gateway)
    for _ in range(3):
        service.on_escalated(make_risk())
    assert len(gateway.sent) == 2
