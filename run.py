import datetime

import click
from flask import current_app

from lending import create_app
from lending.extensions import db
from lending.models import User, Profile, ActivityLog, Equipment, Accessory, Rental
from lending.services.account_service import ensure_admin
from lending.services.equipment_service import create_equipment
from lending.services.rental_service import mark_overdue_rentals
from lending.utils import session_management

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'User': User,
        'Profile': Profile,
        'ActivityLog': ActivityLog,
        'Equipment': Equipment,
        'Accessory': Accessory,
        'Rental': Rental
    }


@app.cli.command('seed_db')
def seed_db_command():
    """Cria as tabelas, o administrador padrão e equipamentos de exemplo."""
    db.create_all()
    ensure_admin(current_app.config['PROTECTED_ADMIN_EMAIL'], current_app.config['DEFAULT_ADMIN_PASSWORD'])

    if Equipment.query.count() == 0:
        create_equipment('Notebook Dell Latitude', description='Notebook para apresentações',
                         serial_number='DL-5420-001',
                         accessories=[('Carregador', '65W'), ('Mouse sem fio', None)])
        create_equipment('Projetor Epson', description='Projetor multimídia 3LCD',
                         serial_number='EP-X41-002',
                         accessories=[('Cabo HDMI', '3 metros'), ('Controle remoto', None)])
        create_equipment('Câmera Canon EOS', serial_number='CN-T7-003',
                         accessories=[('Bateria extra', None), ('Cartão SD 64GB', None)])
        db.session.commit()

    click.echo('Banco de dados populado com o administrador e equipamentos de exemplo!')


@app.cli.command('reset_admin_password')
@click.option('--password', default=None, help='Nova senha (padrão: DEFAULT_ADMIN_PASSWORD).')
def reset_admin_password_command(password):
    """Redefine a senha do administrador principal."""
    email = current_app.config['PROTECTED_ADMIN_EMAIL']
    ensure_admin(email, password or current_app.config['DEFAULT_ADMIN_PASSWORD'])
    click.echo(f'Senha do administrador {email} redefinida.')


@app.cli.command('mark_overdue')
@click.option('--date', 'date_str', default=None, help='Data de referência (AAAA-MM-DD).')
def mark_overdue_command(date_str):
    """Marca como atrasados os empréstimos com devolução vencida."""
    today = datetime.datetime.strptime(date_str, '%Y-%m-%d').date() if date_str else None
    with session_management():
        overdue = mark_overdue_rentals(today)
    click.echo(f'{len(overdue)} empréstimo(s) marcados como atrasados.')
