from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, current_user
from flask_mail import Message
from markupsafe import Markup
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, BooleanField
from wtforms.validators import DataRequired, Email, EqualTo, Length

from lending.extensions import db, mail
from lending.models.user import User
from lending.services.account_service import find_user_by_email, ensure_profile, create_account, AccountError
from lending.services.activity_service import log_event
from lending.utils import session_management

auth = Blueprint('auth', __name__)


# --- Formulários ---
class LoginForm(FlaskForm):
    email = StringField('E-mail', validators=[DataRequired(), Email()])
    password = PasswordField('Senha', validators=[DataRequired()])
    remember = BooleanField('Lembrar de mim')
    submit = SubmitField('Entrar')


class RegistrationForm(FlaskForm):
    name = StringField('Nome', validators=[DataRequired(message="Este campo é obrigatório.")])
    email = StringField('E-mail', validators=[DataRequired(message="Este campo é obrigatório."), Email(message="Por favor, insira um e-mail válido.")])
    password = PasswordField('Senha', validators=[DataRequired(message="Este campo é obrigatório."), Length(min=6, message="A senha deve ter no mínimo 6 caracteres.")])
    password2 = PasswordField('Confirme a Senha', validators=[DataRequired(message="Este campo é obrigatório."), EqualTo('password', message='As senhas devem ser iguais.')])
    submit = SubmitField('Criar Conta')


class ForgotPasswordForm(FlaskForm):
    email = StringField('E-mail', validators=[DataRequired(), Email()])
    submit = SubmitField('Enviar Link de Recuperação')


class ResetPasswordForm(FlaskForm):
    password = PasswordField('Nova Senha', validators=[DataRequired(), Length(min=6, message="A senha deve ter no mínimo 6 caracteres.")])
    password2 = PasswordField('Confirme a Senha', validators=[DataRequired(), EqualTo('password', message='As senhas devem ser iguais.')])
    submit = SubmitField('Redefinir Senha')


def _home_for(user):
    if user.is_admin:
        return url_for('admin.dashboard')
    return url_for('main.dashboard')


# --- Rotas ---
@auth.route('/')
@auth.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(_home_for(current_user))

    form = LoginForm()
    if form.validate_on_submit():
        user = find_user_by_email(form.email.data)
        if user and user.check_password(form.password.data):
            login_user(user, remember=form.remember.data)
            ensure_profile(user)
            log_event('Login', 'SUCESSO', {'email': user.email}, user_id=user.id, ip_address=request.remote_addr)
            return redirect(_home_for(user))
        log_event('Login', 'FALHA', {'email': form.email.data}, ip_address=request.remote_addr)
        flash('Login falhou. Verifique seu e-mail e senha.', 'danger')
        return redirect(url_for('auth.login'))

    return render_template('login.html', form=form)


@auth.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(_home_for(current_user))

    form = RegistrationForm()
    if form.validate_on_submit():
        if find_user_by_email(form.email.data):
            # Mensagem com link para a recuperação de senha
            recovery_link = url_for('auth.forgot_password')
            flash(Markup('Este e-mail já está cadastrado. Se você já possui uma conta, '
                         '<a href="{}">clique aqui para recuperar sua senha.</a>').format(recovery_link), 'danger')
            return redirect(url_for('auth.register'))
        try:
            with session_management():
                user = create_account(form.email.data, form.name.data, form.password.data)
        except AccountError as e:
            flash(str(e), 'danger')
            return render_template('register.html', form=form)

        log_event('Cadastro', 'SUCESSO', {'email': user.email}, user_id=user.id, ip_address=request.remote_addr)
        flash('Cadastro realizado com sucesso! Faça o login para continuar.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('register.html', form=form)


def send_reset_email(user):
    token = user.get_reset_token()
    reset_link = url_for('auth.reset_password', token=token, _external=True)
    msg = Message('Redefinição de senha', recipients=[user.email])
    msg.body = (f'Para redefinir sua senha, acesse o link abaixo:\n{reset_link}\n\n'
                'Se você não fez esta solicitação, ignore este e-mail.')
    mail.send(msg)
    current_app.logger.info('Link de recuperação enviado para %s', user.email)


@auth.route('/forgot-password', methods=['GET', 'POST'])
def forgot_password():
    form = ForgotPasswordForm()
    if form.validate_on_submit():
        user = find_user_by_email(form.email.data)
        if user:
            send_reset_email(user)
            flash('Um link de recuperação foi enviado para seu e-mail.', 'info')
        else:
            flash('E-mail não encontrado em nosso sistema.', 'warning')
        return redirect(url_for('auth.login'))
    return render_template('forgot_password.html', form=form)


@auth.route('/reset-password/<token>', methods=['GET', 'POST'])
def reset_password(token):
    user = User.verify_reset_token(token)
    if user is None:
        flash('Link de recuperação inválido ou expirado.', 'warning')
        return redirect(url_for('auth.forgot_password'))

    form = ResetPasswordForm()
    if form.validate_on_submit():
        user.set_password(form.password.data)
        db.session.commit()
        log_event('Redefinição de senha', 'SUCESSO', {'email': user.email}, user_id=user.id, ip_address=request.remote_addr)
        flash('Senha redefinida! Faça o login com a nova senha.', 'success')
        return redirect(url_for('auth.login'))
    return render_template('reset_password.html', form=form)


@auth.route('/logout')
def logout():
    logout_user()
    return redirect(url_for('auth.login'))
