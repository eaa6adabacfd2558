"""
Tests del mapeo de errores de base de datos e inesperados a respuestas HTTP
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from salones import main
from salones.database import get_db
from salones.models.reserva import Reserva
from salones.services import reservas as service


class _FailingSession:
    """Sesión que falla en cualquier consulta"""

    def __init__(self, exc):
        self.exc = exc

    def execute(self, *args, **kwargs):
        raise self.exc

    def query(self, *args, **kwargs):
        raise self.exc


def _connection_refused():
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.fixture
def failing_db(client):
    def _use(exc):
        main.app.dependency_overrides[get_db] = lambda: _FailingSession(exc)
    return _use


def test_operational_error_returns_503_without_detail(client, failing_db, monkeypatch):
    monkeypatch.setattr(main, "IS_DEVELOPMENT", False)
    failing_db(_connection_refused())

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json() == {
        "status": "error",
        "message": "Error de conexión con la base de datos",
    }


def test_operational_error_detail_only_in_development(client, failing_db, monkeypatch):
    monkeypatch.setattr(main, "IS_DEVELOPMENT", True)
    failing_db(_connection_refused())

    response = client.get("/health")

    assert response.status_code == 503
    assert "connection refused" in response.json()["detail"]


def test_integrity_error_outside_the_slot_index_returns_409(
    client, db, auth_headers, admin, salon, turno, servicios, fecha, monkeypatch
):
    def _duplicated_link(*args, **kwargs):
        raise IntegrityError(
            "INSERT INTO reservas_servicios",
            {},
            Exception(
                "UNIQUE constraint failed: "
                "reservas_servicios.reserva_id, reservas_servicios.servicio_id"
            ),
        )

    monkeypatch.setattr(service, "_attach_servicios", _duplicated_link)

    response = client.post(
        "/reservations/",
        json={
            "fecha_reserva": fecha.isoformat(),
            "salon_id": 1,
            "turno_id": 1,
            "servicios": [{"servicio_id": 1}],
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {
        "status": "error",
        "message": "Ya existe un registro con estos datos",
    }
    # La reserva escrita antes del fallo se revierte
    assert db.query(Reserva).count() == 0


def test_unhandled_exception_returns_500(client, auth_headers, admin, fecha, monkeypatch):
    monkeypatch.setattr(main, "IS_DEVELOPMENT", False)

    def _boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(service, "check_availability", _boom)
    unsafe_client = TestClient(main.app, raise_server_exceptions=False)

    response = unsafe_client.post(
        "/reservations/check-availability",
        json={"fecha_reserva": fecha.isoformat(), "salon_id": 1, "turno_id": 1},
        headers=auth_headers(admin),
    )

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Error interno del servidor"}
