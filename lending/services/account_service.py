from flask import current_app

from lending.extensions import db
from lending.models.user import User, Profile, ROLES

DEFAULT_PROFILE_NAME = 'Usuário'


class AccountError(Exception):
    """Operação de conta/perfil recusada."""


def find_user_by_email(email):
    return User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()


def ensure_profile(user, name=None):
    """Cria o perfil no primeiro login caso ele ainda não exista."""
    if user.profile is not None:
        return user.profile
    profile = Profile(id=user.id, email=user.email, name=name or DEFAULT_PROFILE_NAME, role='user')
    db.session.add(profile)
    db.session.commit()
    current_app.logger.info('Perfil criado para %s', user.email)
    return profile


def create_account(email, name, password, role='user'):
    """Cria a identidade de login e o perfil. Não faz commit."""
    email = email.strip()
    if role not in ROLES:
        raise AccountError(f'Função inválida: {role}')
    if find_user_by_email(email):
        raise AccountError('Este e-mail já está cadastrado.')
    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.flush()
    user.profile = Profile(id=user.id, email=email, name=name.strip(), role=role)
    return user


def update_profile(profile, name, email=None, role=None):
    """Atualiza apenas o registro de perfil; o e-mail de login não muda."""
    profile.name = name.strip()
    if email is not None:
        profile.email = email.strip()
    if role is not None:
        if role not in ROLES:
            raise AccountError(f'Função inválida: {role}')
        profile.role = role
    return profile


def delete_profile(profile, acting_user):
    # Vale o e-mail de login; o do perfil pode ser editado pelo próprio usuário
    login_email = profile.user.email if profile.user else profile.email
    if login_email.lower() == current_app.config['PROTECTED_ADMIN_EMAIL'].lower():
        raise AccountError('Não é possível excluir o usuário administrador principal.')
    if acting_user is not None and profile.id == acting_user.id:
        raise AccountError('Você não pode excluir o seu próprio perfil.')
    db.session.delete(profile)


def ensure_admin(email, password, name='Administrador'):
    """Garante que exista um administrador com o e-mail e senha informados."""
    user = find_user_by_email(email)
    if user is None:
        user = create_account(email, name, password, role='admin')
    else:
        user.set_password(password)
        if user.profile is None:
            user.profile = Profile(id=user.id, email=user.email, name=name, role='admin')
        else:
            user.profile.role = 'admin'
    db.session.commit()
    return user
