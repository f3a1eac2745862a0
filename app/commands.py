from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from app import db
from app.models import (
    Empresa, EmpresaEmpleado, Personal, PersonalComision, Vehiculo, Visita,
)


@click.command('seed-demo')
@click.option('--create-tables', is_flag=True, help='Crear las tablas antes de poblar.')
@with_appcontext
def seed_demo(create_tables):
    """Carga un registro de ejemplo por cada tipo de entidad."""
    if create_tables:
        db.create_all()

    today = current_app.extensions['gate_clock'].today()

    if not Personal.query.filter_by(rut='11111111-1').first():
        db.session.add(Personal(
            grado='SG1', nombres='Juan', paterno='Pérez', materno='Soto',
            rut='11111111-1', es_residente=True, unidad='Guarnición'
        ))
        click.echo("Personal de ejemplo creado.")

    empresa = Empresa.query.filter_by(nombre='Servicios Demo').first()
    if not empresa:
        empresa = Empresa(nombre='Servicios Demo')
        db.session.add(empresa)
        db.session.flush()

    if not EmpresaEmpleado.query.filter_by(rut='22222222-2').first():
        db.session.add(EmpresaEmpleado(
            empresa_id=empresa.id, nombre='Ana', paterno='Rojas', rut='22222222-2',
            fecha_inicio=today, fecha_expiracion=today + timedelta(days=30)
        ))
        click.echo("Empleado de empresa de ejemplo creado.")

    if not Visita.query.filter_by(rut='33333333-3').first():
        db.session.add(Visita(
            nombre='Pedro', paterno='González', rut='33333333-3', tipo='Visita',
            status='autorizado', fecha_inicio=today, fecha_expiracion=today + timedelta(days=7)
        ))
        click.echo("Visita de ejemplo creada.")

    if not Vehiculo.query.filter_by(patente='ABCD12').first():
        db.session.add(Vehiculo(
            patente='ABCD12', marca='Toyota', modelo='Hilux', tipo='FUNCIONARIO',
            asociado_tipo='FUNCIONARIO', status='autorizado', acceso_permanente=True
        ))
        click.echo("Vehículo de ejemplo creado.")

    if not PersonalComision.query.filter_by(rut='44444444-4').first():
        db.session.add(PersonalComision(rut='44444444-4', nombre_completo='CB2 Luis Muñoz', estado='Activo'))
        click.echo("Personal en comisión de ejemplo creado.")

    db.session.commit()

    # El vehículo de ejemplo queda asociado al personal de ejemplo
    vehiculo = Vehiculo.query.filter_by(patente='ABCD12').first()
    personal = Personal.query.filter_by(rut='11111111-1').first()
    if vehiculo.asociado_id is None:
        vehiculo.asociado_id = personal.id
        db.session.commit()

    click.echo("Datos de ejemplo listos.")
