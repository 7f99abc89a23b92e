from flask import Blueprint, render_template, redirect, url_for, request, flash, current_app
from flask_login import login_required, current_user
from functools import wraps

from lending.extensions import db
from lending.forms.forms import EquipmentForm, AccessoryForm, ReturnForm, AdminUserForm, REPORT_STATUS_CHOICES
from lending.models.equipment import Equipment
from lending.models.rental import Rental
from lending.models.user import Profile
from lending.services import equipment_service, rental_service, report_service
from lending.services.account_service import create_account, update_profile, delete_profile, AccountError
from lending.services.activity_service import log_event, recent_activity
from lending.services.rental_service import RentalError
from lending.utils import session_management, now_local, parse_accessory_lines, format_accessory_lines

admin = Blueprint('admin', __name__)


# --- Decorador Admin Required ---
def admin_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            flash('Acesso restrito a administradores.', 'warning')
            return redirect(url_for('main.dashboard'))
        return f(*args, **kwargs)
    return decorated_function


def _audit(event_type, details):
    log_event(event_type, 'SUCESSO', details, user_id=current_user.id, ip_address=request.remote_addr)


# --- Rotas Principais do Admin ---
@admin.route('/dashboard')
@admin_required
def dashboard():
    stats = rental_service.dashboard_stats()
    return render_template('admin/dashboard.html', stats=stats)


# --- Rotas de Gerenciamento de Equipamentos ---
@admin.route('/equipment')
@admin_required
def equipment_list():
    equipments = equipment_service.list_equipments()
    return render_template('admin/equipment_list.html', equipments=equipments)


@admin.route('/equipment/new', methods=['GET', 'POST'])
@admin_required
def add_equipment():
    form = EquipmentForm()
    if form.validate_on_submit():
        with session_management():
            equipment = equipment_service.create_equipment(
                form.name.data,
                description=form.description.data,
                serial_number=form.serial_number.data,
                status=form.status.data,
                accessories=parse_accessory_lines(form.accessory_lines.data)
            )
        _audit('Equipamento criado', {'equipment_id': equipment.id, 'name': equipment.name})
        flash('Equipamento adicionado com sucesso!', 'success')
        return redirect(url_for('admin.equipment_list'))
    return render_template('admin/equipment_form.html', form=form, title='Novo Equipamento')


@admin.route('/equipment/<int:equipment_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_equipment(equipment_id):
    equipment = Equipment.query.get_or_404(equipment_id)
    form = EquipmentForm(obj=equipment)
    if request.method == 'GET':
        form.accessory_lines.data = format_accessory_lines(equipment.accessories)

    if form.validate_on_submit():
        with session_management():
            equipment_service.update_equipment(
                equipment,
                form.name.data,
                description=form.description.data,
                serial_number=form.serial_number.data,
                status=form.status.data,
                accessories=parse_accessory_lines(form.accessory_lines.data)
            )
        _audit('Equipamento atualizado', {'equipment_id': equipment.id, 'status': equipment.status})
        flash('Equipamento atualizado com sucesso!', 'success')
        return redirect(url_for('admin.equipment_list'))
    return render_template('admin/equipment_form.html', form=form, title=f'Editando: {equipment.name}')


@admin.route('/equipment/<int:equipment_id>/delete', methods=['POST'])
@admin_required
def delete_equipment(equipment_id):
    equipment = Equipment.query.get_or_404(equipment_id)
    name = equipment.name
    with session_management():
        equipment_service.delete_equipment(equipment)
    _audit('Equipamento excluído', {'equipment_id': equipment_id, 'name': name})
    flash(f'Equipamento "{name}" excluído com sucesso!', 'success')
    return redirect(url_for('admin.equipment_list'))


@admin.route('/accessories/new', methods=['GET', 'POST'])
@admin_required
def add_accessory():
    form = AccessoryForm()
    if request.method == 'GET' and request.args.get('equipment_id', type=int):
        form.equipment.data = db.session.get(Equipment, request.args.get('equipment_id', type=int))
    if form.validate_on_submit():
        with session_management():
            accessory = equipment_service.add_accessory(form.equipment.data, form.name.data, form.description.data)
        _audit('Acessório criado', {'accessory_id': accessory.id, 'equipment_id': accessory.equipment_id})
        flash('Acessório adicionado com sucesso!', 'success')
        return redirect(url_for('admin.equipment_list'))
    return render_template('admin/accessory_form.html', form=form)


# --- Relatórios de Empréstimos ---
@admin.route('/reports')
@admin_required
def rental_reports():
    status = request.args.get('status', 'all')
    search = request.args.get('search', '')
    if status not in dict(REPORT_STATUS_CHOICES):
        flash('Filtro de status inválido.', 'warning')
        status = 'all'
    rows = report_service.rental_report(status=status, search=search)
    return render_template('admin/reports.html', rows=rows, status=status, search=search,
                           status_choices=REPORT_STATUS_CHOICES)


@admin.route('/reports/<int:rental_id>/return', methods=['GET', 'POST'])
@admin_required
def return_rental(rental_id):
    rental = Rental.query.get_or_404(rental_id)
    form = ReturnForm()
    if request.method == 'GET':
        form.return_date.data, form.return_time.data = now_local()

    if form.validate_on_submit():
        try:
            with session_management():
                rental_service.return_rental(rental, form.return_date.data, form.return_time.data,
                                             form.observations.data)
        except RentalError as e:
            flash(str(e), 'warning')
            return redirect(url_for('admin.rental_reports'))
        _audit('Devolução', {'rental_id': rental.id, 'equipment_id': rental.equipment_id})
        flash('Devolução registrada com sucesso!', 'success')
        return redirect(url_for('admin.rental_reports'))

    return render_template('return_form.html', form=form, rental=rental,
                           action=url_for('admin.return_rental', rental_id=rental.id))


@admin.route('/activity')
@admin_required
def activity_log():
    page = request.args.get('page', 1, type=int)
    entries = recent_activity(page, current_app.config['RENTALS_PER_PAGE'])
    return render_template('admin/activity.html', entries=entries)


# --- Rotas de Gerenciamento de Usuários ---
@admin.route('/users')
@admin_required
def users_list():
    page = request.args.get('page', 1, type=int)
    profiles = Profile.query.order_by(Profile.created_at.desc(), Profile.id.desc()).paginate(
        page=page, per_page=current_app.config['USERS_PER_PAGE'], error_out=False)
    return render_template('admin/users_list.html', profiles=profiles,
                           protected_email=current_app.config['PROTECTED_ADMIN_EMAIL'])


@admin.route('/users/new', methods=['GET', 'POST'])
@admin_required
def add_user():
    form = AdminUserForm()
    if form.validate_on_submit():
        if not form.password.data:
            form.password.errors.append('Informe uma senha para o novo usuário.')
            return render_template('admin/user_form.html', form=form, profile=None)
        try:
            with session_management():
                user = create_account(form.email.data, form.name.data, form.password.data, role=form.role.data)
        except AccountError as e:
            flash(str(e), 'danger')
            return render_template('admin/user_form.html', form=form, profile=None)
        _audit('Usuário criado', {'user_id': user.id, 'role': form.role.data})
        flash('Usuário criado com sucesso!', 'success')
        return redirect(url_for('admin.users_list'))
    return render_template('admin/user_form.html', form=form, profile=None)


@admin.route('/users/<int:profile_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_user(profile_id):
    profile = Profile.query.get_or_404(profile_id)
    form = AdminUserForm(obj=profile)
    # O e-mail não é editável por aqui
    form.email.data = profile.email
    if form.validate_on_submit():
        with session_management():
            update_profile(profile, form.name.data, role=form.role.data)
        _audit('Usuário atualizado', {'user_id': profile.id, 'role': profile.role})
        flash('Usuário atualizado com sucesso!', 'success')
        return redirect(url_for('admin.users_list'))
    return render_template('admin/user_form.html', form=form, profile=profile)


@admin.route('/users/<int:profile_id>/delete', methods=['POST'])
@admin_required
def delete_user(profile_id):
    profile = Profile.query.get_or_404(profile_id)
    try:
        with session_management():
            delete_profile(profile, current_user)
    except AccountError as e:
        flash(str(e), 'danger')
        return redirect(url_for('admin.users_list'))
    _audit('Usuário excluído', {'user_id': profile_id})
    flash('Usuário excluído com sucesso!', 'success')
    return redirect(url_for('admin.users_list'))
