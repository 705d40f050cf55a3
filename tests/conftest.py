import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas-con-longitud-suficiente")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.config.database import Database
from app.core.auth.permissions import Role
from app.core.auth.security import create_access_token, hash_password
from app.main import create_app
from app.shared.database.models import Affiliation, Empresa, Plan, User
from app.shared.services.media_storage import get_media_storage


class FakeMediaStorage:
    """Almacenamiento en memoria con la misma interfaz que MediaStorage"""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail = False

    def upload(self, fileobj, folder):
        if self.fail:
            raise RuntimeError("cloudinary caído")
        content = fileobj.read()
        public_id = f"{folder}/foto{len(self.uploads) + 1}"
        self.uploads.append({"public_id": public_id, "size": len(content)})
        return {"public_id": public_id, "format": "jpg"}

    def delete(self, public_id):
        self.deleted.append(public_id)

    def signed_url(self, public_id, file_format):
        return f"https://signed.example/{public_id}.{file_format}?expires=3600"


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def media_storage():
    return FakeMediaStorage()


@pytest.fixture
def client(database, media_storage):
    app = create_app(database)
    app.dependency_overrides[get_media_storage] = lambda: media_storage
    with TestClient(app) as test_client:
        yield test_client


def make_user(session, role, email, full_name, password=None, codigo=None):
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password) if password else "sin-password",
        codigo=codigo,
        role=role.value
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(
        user_id=user.id,
        full_name=user.full_name,
        email=user.email,
        codigo=user.codigo,
        role=user.role
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def vendedor(db_session):
    return make_user(db_session, Role.VENDEDOR, "vendedor@fichas.com", "Ana Vendedora", codigo="V001")


@pytest.fixture
def otro_vendedor(db_session):
    return make_user(db_session, Role.VENDEDOR, "otro@fichas.com", "Bruno Vendedor", codigo="V002")


@pytest.fixture
def supervisor(db_session):
    return make_user(db_session, Role.SUPERVISOR, "supervisor@fichas.com", "Carla Supervisora")


@pytest.fixture
def gerente(db_session):
    return make_user(db_session, Role.GERENTE, "gerente@fichas.com", "Diego Gerente")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, Role.ADMINISTRADOR, "admin@fichas.com", "Elena Admin")


@pytest.fixture
def plan(db_session):
    plan = Plan(value="PLAN_A", label="Plan A", tipo="Familiar")
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture
def empresa(db_session):
    empresa = Empresa(value="EMP1", label="Empresa Uno")
    db_session.add(empresa)
    db_session.commit()
    db_session.refresh(empresa)
    return empresa


def make_affiliation(session, user, status="Abierta", total=None, plan=None, empresa=None,
                     fecha_creacion=None, form_data=None, **extra):
    values = {
        "titular_nombre": "Pérez, Juan",
        "titular_dni": "30111222",
        **extra
    }
    affiliation = Affiliation(
        user_id=user.id,
        form_data=form_data or {"nombreTitular": "Juan", "apellidoTitular": "Pérez"},
        plan=plan,
        empresa=empresa,
        total=total,
        status=status,
        fecha_creacion=fecha_creacion or datetime.now(),
        **values
    )
    session.add(affiliation)
    session.commit()
    session.refresh(affiliation)
    return affiliation
