import pytest
from fastapi.testclient import TestClient

from fraud_service.main import create_app
from fraud_service.models.records import TransactionRecord


@pytest.fixture
def zeros():
    return (0.0,) * 28


@pytest.fixture
def make_record(zeros):
    def _make(time=50000, amount=150, v_values=None, **features):
        values = list(zeros if v_values is None else v_values)
        for name, value in features.items():
            values[int(name[1:]) - 1] = value
        return TransactionRecord(time=time, amount=amount, v_values=tuple(values))
    return _make


@pytest.fixture
def client():
    with TestClient(create_app()) as c:
        yield c
