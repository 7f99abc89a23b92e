from lending.extensions import db
from lending.models import User, Profile

from conftest import login, ADMIN_EMAIL, MEMBER_EMAIL, MEMBER_PASSWORD


def test_users_list(admin_client, member_id):
    body = admin_client.get('/admin/users').get_data(as_text=True)
    assert 'Maria Silva' in body
    assert MEMBER_EMAIL in body
    assert 'Administrador' in body


def test_create_user_with_role(app, admin_client):
    response = admin_client.post('/admin/users/new', data={
        'email': 'carlos@empresa.com.br',
        'name': 'Carlos Pereira',
        'password': 'segredo1',
        'role': 'admin',
    })
    assert response.status_code == 302

    with app.app_context():
        user = User.query.filter_by(email='carlos@empresa.com.br').one()
        assert user.check_password('segredo1')
        assert user.profile.role == 'admin'
        assert user.is_admin


def test_create_user_requires_password(app, admin_client):
    response = admin_client.post('/admin/users/new', data={
        'email': 'carlos@empresa.com.br',
        'name': 'Carlos Pereira',
        'password': '',
        'role': 'user',
    })
    assert response.status_code == 200
    assert 'Informe uma senha' in response.get_data(as_text=True)
    with app.app_context():
        assert User.query.filter_by(email='carlos@empresa.com.br').first() is None


def test_create_user_with_existing_email(app, admin_client, member_id):
    response = admin_client.post('/admin/users/new', data={
        'email': MEMBER_EMAIL,
        'name': 'Maria Duplicada',
        'password': 'segredo1',
        'role': 'user',
    })
    assert response.status_code == 200
    assert 'já está cadastrado' in response.get_data(as_text=True)
    with app.app_context():
        assert User.query.count() == 2


def test_edit_user_changes_name_and_role_only(app, admin_client, member_id):
    response = admin_client.post(f'/admin/users/{member_id}/edit', data={
        'email': 'outro@empresa.com.br',
        'name': 'Maria S. Costa',
        'role': 'admin',
    })
    assert response.status_code == 302

    with app.app_context():
        profile = db.session.get(Profile, member_id)
        assert profile.name == 'Maria S. Costa'
        assert profile.role == 'admin'
        assert profile.email == MEMBER_EMAIL


def test_protected_admin_cannot_be_deleted(app, client, admin_id):
    with app.app_context():
        second = User(email='chefe@empresa.com.br')
        second.set_password('chefe123')
        db.session.add(second)
        db.session.flush()
        second.profile = Profile(id=second.id, email=second.email, name='Chefe', role='admin')
        db.session.commit()
    login(client, 'chefe@empresa.com.br', 'chefe123')

    response = client.post(f'/admin/users/{admin_id}/delete', follow_redirects=True)
    assert 'administrador principal' in response.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(Profile, admin_id) is not None


def test_admin_cannot_delete_self(app, admin_client, admin_id, member_id):
    with app.app_context():
        db.session.get(Profile, member_id).role = 'admin'
        db.session.commit()
    admin_client.get('/logout')
    login(admin_client, MEMBER_EMAIL, MEMBER_PASSWORD)

    response = admin_client.post(f'/admin/users/{member_id}/delete', follow_redirects=True)
    assert 'próprio perfil' in response.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(Profile, member_id) is not None


def test_delete_profile_keeps_login(app, admin_client, member_id):
    response = admin_client.post(f'/admin/users/{member_id}/delete')
    assert response.status_code == 302

    with app.app_context():
        assert db.session.get(Profile, member_id) is None
        assert db.session.get(User, member_id) is not None


def test_member_cannot_list_users(member_client):
    response = member_client.get('/admin/users')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard')


def test_protection_follows_login_email_not_profile_email(app, admin_client, admin_id, member_id):
    with app.app_context():
        db.session.get(Profile, member_id).email = ADMIN_EMAIL
        db.session.get(Profile, admin_id).email = 'outro@empresa.com.br'
        db.session.commit()

    admin_client.post(f'/admin/users/{member_id}/delete')

    with app.app_context():
        assert db.session.get(Profile, member_id) is None

    with app.app_context():
        second = User(email='chefe@empresa.com.br')
        second.set_password('chefe123')
        db.session.add(second)
        db.session.flush()
        second.profile = Profile(id=second.id, email=second.email, name='Chefe', role='admin')
        db.session.commit()
    admin_client.get('/logout')
    login(admin_client, 'chefe@empresa.com.br', 'chefe123')

    response = admin_client.post(f'/admin/users/{admin_id}/delete', follow_redirects=True)
    assert 'administrador principal' in response.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(Profile, admin_id) is not None
