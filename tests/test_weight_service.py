"""Tests for weight log service."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from wellness_engine.services.weights import WeightLogService
from tests.conftest import InMemoryWeightLogRepository


def _service() -> WeightLogService:
    return WeightLogService(InMemoryWeightLogRepository())


def test_latest_weight_is_first_of_list() -> None:
    service = _service()
    user_id = uuid4()
    now = datetime.now(tz=UTC)
    service.add_log(user_id, 182, logged_at=now - timedelta(days=3))
    newest = service.add_log(user_id, 180, logged_at=now)
    service.add_log(user_id, 181, logged_at=now - timedelta(days=1))

    logs = service.list_logs(user_id)

    assert [log.weight for log in logs] == [180, 181, 182]
    assert service.get_latest_weight(user_id) == logs[0] == newest


def test_latest_weight_none_without_logs() -> None:
    assert _service().get_latest_weight(uuid4()) is None


def test_add_log_rejects_invalid_input() -> None:
    service = _service()
    with pytest.raises(ValueError):
        service.add_log(uuid4(), 0)
    with pytest.raises(ValueError):
        service.add_log(uuid4(), 150, unit="stone")


def test_update_log_corrects_reading() -> None:
    service = _service()
    user_id = uuid4()
    log = service.add_log(user_id, 180, notes="morning")

    updated = service.update_log(user_id, log.id, weight=179.5)

    assert updated is not None
    assert updated.weight == 179.5
    assert updated.notes == "morning"
    assert service.get_latest_weight(user_id) == updated


def test_update_log_missing_or_forbidden_fields() -> None:
    service = _service()
    user_id = uuid4()
    log = service.add_log(user_id, 180)

    assert service.update_log(user_id, uuid4(), weight=170) is None
    assert service.update_log(uuid4(), log.id, weight=170) is None
    with pytest.raises(ValueError, match="user_id"):
        service.update_log(user_id, log.id, user_id=uuid4())


def test_delete_log() -> None:
    service = _service()
    user_id = uuid4()
    log = service.add_log(user_id, 180)

    assert service.delete_log(user_id, log.id) is True
    assert service.delete_log(user_id, log.id) is False
    assert service.list_logs(user_id) == []


def test_logs_in_range_are_inclusive() -> None:
    service = _service()
    user_id = uuid4()
    start = datetime(2024, 1, 1, tzinfo=UTC)
    end = datetime(2024, 1, 10, tzinfo=UTC)
    service.add_log(user_id, 180, logged_at=start)
    service.add_log(user_id, 179, logged_at=end)
    service.add_log(user_id, 178, logged_at=end + timedelta(seconds=1))

    logs = service.get_logs_in_range(user_id, start, end)

    assert [log.weight for log in logs] == [179, 180]


def test_weight_trend_is_oldest_first() -> None:
    service = _service()
    user_id = uuid4()
    now = datetime(2024, 3, 1, tzinfo=UTC)
    service.add_log(user_id, 190, logged_at=now - timedelta(days=45))
    service.add_log(user_id, 185, logged_at=now - timedelta(days=20))
    service.add_log(user_id, 183, logged_at=now - timedelta(days=2))

    trend = service.get_weight_trend(user_id, days=30, now=now)

    assert [log.weight for log in trend] == [185, 183]


def test_weight_change_converts_mixed_units() -> None:
    service = _service()
    user_id = uuid4()
    now = datetime.now(tz=UTC)
    service.add_log(user_id, 100, unit="kg", logged_at=now - timedelta(days=14))
    service.add_log(user_id, 215, unit="lbs", logged_at=now)

    change = service.calculate_weight_change(user_id)

    assert change is not None
    assert change.unit == "lbs"
    assert change.change == pytest.approx(215 - 220.462, abs=0.01)
    assert change.change_percent == pytest.approx(-2.478, abs=0.01)
    assert change.days == 14

    in_kg = service.calculate_weight_change(user_id, unit="kg")
    assert in_kg is not None
    assert in_kg.change == pytest.approx(97.522 - 100, abs=0.01)


def test_weight_change_needs_two_logs() -> None:
    service = _service()
    user_id = uuid4()
    assert service.calculate_weight_change(user_id) is None
    service.add_log(user_id, 180)
    assert service.calculate_weight_change(user_id) is None
