import datetime

import pytest

from config import TestingConfig
from lending import create_app
from lending.extensions import db
from lending.models import User, Equipment
from lending.services.account_service import create_account
from lending.services.equipment_service import create_equipment
from lending.services.rental_service import create_rental

ADMIN_EMAIL = 'admin@admin.com'
ADMIN_PASSWORD = 'admin123'
MEMBER_EMAIL = 'maria@empresa.com.br'
MEMBER_PASSWORD = 'senha123'
OTHER_EMAIL = 'joao@empresa.com.br'
OTHER_PASSWORD = 'senha456'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Contexto de aplicação para testes que chamam os serviços diretamente."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def _create(app, email, name, password, role='user'):
    with app.app_context():
        user = create_account(email, name, password, role=role)
        db.session.commit()
        return user.id


@pytest.fixture
def admin_id(app):
    return _create(app, ADMIN_EMAIL, 'Administrador', ADMIN_PASSWORD, role='admin')


@pytest.fixture
def member_id(app):
    return _create(app, MEMBER_EMAIL, 'Maria Silva', MEMBER_PASSWORD)


@pytest.fixture
def other_id(app):
    return _create(app, OTHER_EMAIL, 'João Souza', OTHER_PASSWORD)


@pytest.fixture
def equipment_id(app):
    with app.app_context():
        equipment = create_equipment('Notebook Dell', description='Notebook para apresentações',
                                     serial_number='DL-001',
                                     accessories=[('Carregador', '65W'), ('Mouse sem fio', None)])
        db.session.commit()
        return equipment.id


@pytest.fixture
def projector_id(app):
    with app.app_context():
        equipment = create_equipment('Projetor Epson', accessories=[('Cabo HDMI', '3 metros')])
        db.session.commit()
        return equipment.id


@pytest.fixture
def make_rental(app):
    """Cria um empréstimo pelo serviço e devolve o id."""
    def _make(user_id, equipment_id, rental_date=None, expected_return_date=None, accessory_ids=None):
        with app.app_context():
            rental = create_rental(
                db.session.get(User, user_id),
                db.session.get(Equipment, equipment_id),
                rental_date or datetime.date(2026, 10, 1),
                datetime.time(9, 30),
                expected_return_date=expected_return_date,
                accessory_ids=accessory_ids
            )
            db.session.commit()
            return rental.id
    return _make


def login(client, email, password, follow_redirects=False):
    return client.post('/login', data={'email': email, 'password': password},
                       follow_redirects=follow_redirects)


@pytest.fixture
def admin_client(client, admin_id):
    login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    return client


@pytest.fixture
def member_client(client, member_id):
    login(client, MEMBER_EMAIL, MEMBER_PASSWORD)
    return client
