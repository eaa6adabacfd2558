"""
Configuración compartida para tests pytest
"""
import pytest
from datetime import date, time, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salones.database import Base, get_db

# Importar todos los modelos para que SQLAlchemy pueda resolver las relaciones
from salones.models.usuario import TipoUsuario, Usuario
from salones.models.salon import Salon
from salones.models.turno import Turno
from salones.models.servicio import Servicio
from salones.models.reserva import Reserva, ReservaServicio
from salones.services.auth import create_access_token


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def override_get_db(db):
    """Override de get_db para tests"""
    def _get_db():
        try:
            yield db
        finally:
            pass
    return _get_db


@pytest.fixture
def client(override_get_db):
    """Cliente HTTP contra la app con la sesión de test inyectada"""
    from salones.main import app

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_usuario(db, usuario_id, nombre, email, tipo, activo=True):
    usuario = Usuario(
        usuario_id=usuario_id,
        nombre=nombre,
        apellido="Test",
        nombre_usuario=email,
        contrasenia="hashed",
        tipo_usuario=tipo,
        celular="1155550000",
        activo=activo,
    )
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario


@pytest.fixture
def admin(db):
    return _make_usuario(db, 1, "Admin", "admin@test.com", TipoUsuario.ADMINISTRADOR)


@pytest.fixture
def empleado(db):
    return _make_usuario(db, 2, "Empleado", "empleado@test.com", TipoUsuario.EMPLEADO)


@pytest.fixture
def cliente(db):
    return _make_usuario(db, 3, "Cliente", "cliente@test.com", TipoUsuario.CLIENTE)


@pytest.fixture
def otro_cliente(db):
    return _make_usuario(db, 4, "Otro", "otro@test.com", TipoUsuario.CLIENTE)


@pytest.fixture
def salon(db):
    """Salón activo de $500"""
    salon = Salon(
        salon_id=1,
        titulo="Salón Principal",
        direccion="Av. Siempreviva 742",
        capacidad=100,
        importe=Decimal("500.00"),
        activo=True,
    )
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


@pytest.fixture
def otro_salon(db):
    salon = Salon(
        salon_id=2,
        titulo="Salón Jardín",
        direccion="Calle Falsa 123",
        capacidad=60,
        importe=Decimal("800.00"),
        activo=True,
    )
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


@pytest.fixture
def turno(db):
    turno = Turno(turno_id=1, orden=1, hora_desde=time(12, 0), hora_hasta=time(14, 0))
    db.add(turno)
    db.commit()
    db.refresh(turno)
    return turno


@pytest.fixture
def otro_turno(db):
    turno = Turno(turno_id=2, orden=2, hora_desde=time(15, 0), hora_hasta=time(17, 0))
    db.add(turno)
    db.commit()
    db.refresh(turno)
    return turno


@pytest.fixture
def servicios(db):
    """Servicios 1 ($100), 2 ($150), 3 ($50) activos y 4 ($75) inactivo"""
    items = [
        Servicio(servicio_id=1, descripcion="Sonido", importe=Decimal("100.00")),
        Servicio(servicio_id=2, descripcion="Catering", importe=Decimal("150.00")),
        Servicio(servicio_id=3, descripcion="Globos", importe=Decimal("50.00")),
        Servicio(
            servicio_id=4, descripcion="Animador", importe=Decimal("75.00"), activo=False
        ),
    ]
    db.add_all(items)
    db.commit()
    return {s.servicio_id: s for s in items}


@pytest.fixture
def fecha():
    """Una fecha futura para reservar"""
    return date.today() + timedelta(days=30)


@pytest.fixture
def auth_headers():
    """Headers Bearer para un usuario dado"""
    def _headers(usuario):
        token = create_access_token({"sub": usuario.nombre_usuario})
        return {"Authorization": f"Bearer {token}"}
    return _headers
