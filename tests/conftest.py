from datetime import datetime

import pytest
import pytz
from flask_jwt_extended import create_access_token

from app import create_app, db
from app.models import (
    Empresa, EmpresaEmpleado, HorasExtra, Personal, PersonalComision, Vehiculo, Visita,
)
from app.services.clock import FixedClock
from config import TestingConfig

SANTIAGO = pytz.timezone('America/Santiago')


def local(year, month, day, hour=10, minute=0):
    return SANTIAGO.localize(datetime(year, month, day, hour, minute))


@pytest.fixture()
def app():
    app = create_app(TestingConfig)
    app.extensions['gate_clock'] = FixedClock(local(2025, 1, 15))

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def clock(app):
    return app.extensions['gate_clock']


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    token = create_access_token(identity='guardia1')
    return {"Authorization": f"Bearer {token}"}


def _save(row):
    db.session.add(row)
    db.session.commit()
    return row


@pytest.fixture()
def make_personal():
    def _make(rut='12345678-9', **kwargs):
        data = dict(grado='CB1', nombres='Carlos', paterno='Díaz', materno='Mora', unidad='Logística')
        data.update(kwargs)
        return _save(Personal(rut=rut, **data))
    return _make


@pytest.fixture()
def make_vehiculo():
    def _make(patente='ABCD12', **kwargs):
        data = dict(marca='Toyota', modelo='Yaris', status='autorizado', acceso_permanente=True)
        data.update(kwargs)
        return _save(Vehiculo(patente=patente, **data))
    return _make


@pytest.fixture()
def make_visita():
    def _make(rut='15555555-5', **kwargs):
        data = dict(nombre='María', paterno='López', tipo='Visita', status='autorizado')
        data.update(kwargs)
        return _save(Visita(rut=rut, **data))
    return _make


@pytest.fixture()
def make_empleado():
    def _make(rut='17777777-7', empresa_nombre='Constructora Sur', **kwargs):
        empresa = Empresa.query.filter_by(nombre=empresa_nombre).first() or _save(Empresa(nombre=empresa_nombre))
        data = dict(nombre='Luis', paterno='Vera', acceso_permanente=True)
        data.update(kwargs)
        return _save(EmpresaEmpleado(rut=rut, empresa_id=empresa.id, **data))
    return _make


@pytest.fixture()
def make_comision():
    def _make(rut='19999999-9', **kwargs):
        data = dict(nombre_completo='SOF Pablo Reyes', estado='Activo')
        data.update(kwargs)
        return _save(PersonalComision(rut=rut, **data))
    return _make


@pytest.fixture()
def make_horas_extra():
    def _make(personal_rut, status='activo'):
        return _save(HorasExtra(personal_rut=personal_rut, status=status))
    return _make
