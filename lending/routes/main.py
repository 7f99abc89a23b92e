from flask import Blueprint, render_template, request, flash, redirect, url_for, jsonify, abort
from flask_login import login_required, current_user

from lending.extensions import db
from lending.forms.forms import RentalForm, ReturnForm, ProfileForm
from lending.models.equipment import Equipment
from lending.models.rental import Rental
from lending.services.account_service import ensure_profile, update_profile
from lending.services.activity_service import log_event
from lending.services import rental_service
from lending.services.rental_service import RentalError
from lending.utils import session_management, now_local

main = Blueprint('main', __name__)


@main.route('/dashboard')
@login_required
def dashboard():
    stats = rental_service.dashboard_stats()
    return render_template('dashboard.html', stats=stats)


@main.route('/rentals/new', methods=['GET', 'POST'])
@login_required
def new_rental():
    form = RentalForm()
    if request.method == 'GET':
        form.rental_date.data, form.rental_time.data = now_local()

    if form.validate_on_submit():
        try:
            with session_management():
                rental = rental_service.create_rental(
                    current_user,
                    form.equipment.data,
                    form.rental_date.data,
                    form.rental_time.data,
                    expected_return_date=form.expected_return_date.data,
                    accessory_ids=form.accessories.data
                )
        except RentalError as e:
            flash(str(e), 'danger')
            return render_template('rental_form.html', form=form), 400

        log_event('Empréstimo', 'SUCESSO',
                  {'rental_id': rental.id, 'equipment_id': rental.equipment_id,
                   'accessories': rental.accessories_list},
                  user_id=current_user.id, ip_address=request.remote_addr)
        flash('Empréstimo registrado com sucesso!', 'success')
        return redirect(url_for('main.profile'))

    return render_template('rental_form.html', form=form)


@main.route('/equipment/<int:equipment_id>/accessories')
@login_required
def equipment_accessories(equipment_id):
    equipment = db.session.get(Equipment, equipment_id)
    if equipment is None:
        return jsonify({'error': 'Equipamento não encontrado'}), 404
    return jsonify({
        'equipment': equipment.to_dict(),
        'accessories': [accessory.to_dict() for accessory in equipment.accessories]
    })


@main.route('/profile')
@login_required
def profile():
    user_profile = ensure_profile(current_user)
    open_rentals = rental_service.open_rentals_for(current_user)
    closed_rentals = rental_service.closed_rentals_for(current_user)
    names = rental_service.accessory_names(open_rentals + closed_rentals)
    return render_template('profile.html',
                           profile=user_profile,
                           open_rentals=open_rentals,
                           closed_rentals=closed_rentals,
                           accessory_names=lambda rental: rental_service.names_for(rental, names))


@main.route('/profile/edit', methods=['GET', 'POST'])
@login_required
def edit_profile():
    user_profile = ensure_profile(current_user)
    form = ProfileForm(obj=user_profile)
    if form.validate_on_submit():
        with session_management():
            update_profile(user_profile, form.name.data, email=form.email.data)
        flash('Perfil atualizado com sucesso!', 'success')
        return redirect(url_for('main.profile'))
    return render_template('profile_edit.html', form=form)


@main.route('/rentals/<int:rental_id>/return', methods=['GET', 'POST'])
@login_required
def return_rental(rental_id):
    rental = Rental.query.get_or_404(rental_id)
    if rental.user_id != current_user.id:
        abort(403)

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
            return redirect(url_for('main.profile'))
        log_event('Devolução', 'SUCESSO', {'rental_id': rental.id, 'equipment_id': rental.equipment_id},
                  user_id=current_user.id, ip_address=request.remote_addr)
        flash('Devolução registrada com sucesso!', 'success')
        return redirect(url_for('main.profile'))

    return render_template('return_form.html', form=form, rental=rental,
                           action=url_for('main.return_rental', rental_id=rental.id))
