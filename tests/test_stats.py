"""
Tests de las consultas de estadísticas y próximas reservas
"""
from datetime import date, timedelta
from decimal import Decimal

from salones.crud import reserva as crud
from salones.models.reserva import Reserva


def _reserva(db, fecha, turno_id=1, total="500.00", activo=True, usuario_id=3):
    reserva = Reserva(
        fecha_reserva=fecha,
        salon_id=1,
        usuario_id=usuario_id,
        turno_id=turno_id,
        tematica="Fiesta",
        importe_salon=Decimal("500.00"),
        importe_total=Decimal(total),
        activo=activo,
    )
    db.add(reserva)
    db.commit()
    return reserva


def test_upcoming_includes_only_active_within_window(
    db, cliente, salon, turno, otro_turno
):
    hoy = date.today()
    manana = _reserva(db, hoy + timedelta(days=1))
    hoy_tarde = _reserva(db, hoy, turno_id=2)
    _reserva(db, hoy + timedelta(days=1), turno_id=2, activo=False)
    _reserva(db, hoy + timedelta(days=5))

    upcoming = crud.get_upcoming(db, dias=1)

    assert [r["reserva_id"] for r in upcoming] == [hoy_tarde.reserva_id, manana.reserva_id]
    assert upcoming[0]["salon_titulo"] == "Salón Principal"
    assert upcoming[0]["nombre_usuario"] == "cliente@test.com"

    assert len(crud.get_upcoming(db, dias=7)) == 3


def test_upcoming_skips_inactive_users(db, cliente, salon, turno):
    _reserva(db, date.today() + timedelta(days=1))
    cliente.activo = False
    db.commit()

    assert crud.get_upcoming(db, dias=3) == []


def test_stats_by_month(db, cliente, salon, turno, otro_turno):
    _reserva(db, date(2030, 3, 10), total="600.00")
    _reserva(db, date(2030, 3, 11), total="700.00")
    _reserva(db, date(2030, 5, 1), total="550.50")
    _reserva(db, date(2030, 5, 2), total="900.00", activo=False)
    _reserva(db, date(2031, 3, 10), total="999.00")

    stats = crud.get_stats_by_month(db, 2030)

    assert [s["mes"] for s in stats] == [3, 5]
    marzo, mayo = stats
    assert marzo["nombre_mes"] == "Marzo"
    assert marzo["total_reservas"] == 2
    assert marzo["total_ingresos"] == Decimal("1300.00")
    assert marzo["promedio_por_reserva"] == Decimal("650.00")
    assert mayo["total_reservas"] == 1
    assert mayo["total_ingresos"] == Decimal("550.50")


def test_most_reserved_month_prefers_earliest_on_tie(db, cliente, salon, turno):
    _reserva(db, date(2030, 8, 1))
    _reserva(db, date(2030, 2, 1))

    assert crud.get_most_reserved_month(db, 2030) == {
        "year": 2030,
        "mes": 2,
        "nombre_mes": "Febrero",
        "total_reservas": 1,
    }


def test_most_reserved_month_without_data(db):
    assert crud.get_most_reserved_month(db, 2030) == {
        "year": 2030,
        "mes": None,
        "nombre_mes": None,
        "total_reservas": 0,
    }


def test_stats_endpoints_are_staff_only(client, auth_headers, empleado, cliente, salon, turno):
    monthly = client.get(
        "/reservations/stats/monthly", params={"year": 2030}, headers=auth_headers(empleado)
    )
    denied = client.get("/reservations/stats/upcoming", headers=auth_headers(cliente))

    assert monthly.status_code == 200
    assert monthly.json() == []
    assert denied.status_code == 403
