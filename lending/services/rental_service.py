import datetime

from flask import current_app

from lending.extensions import db
from lending.models.equipment import Equipment, Accessory
from lending.models.rental import Rental, OPEN_STATUSES


class RentalError(Exception):
    """Transição de empréstimo/devolução inválida."""


def available_equipments():
    return Equipment.query.filter_by(status='available').order_by(Equipment.name)


def create_rental(user, equipment, rental_date, rental_time, expected_return_date=None, accessory_ids=None):
    """
    Registra um empréstimo e marca o equipamento como emprestado.
    As duas escritas ficam na mesma sessão; o commit é de quem chama.
    """
    if equipment is None:
        raise RentalError('Equipamento não encontrado.')
    if not equipment.is_available:
        raise RentalError(f'O equipamento "{equipment.name}" não está disponível.')
    if expected_return_date is not None and expected_return_date < rental_date:
        raise RentalError('A data prevista de devolução não pode ser anterior à data do empréstimo.')

    accessory_ids = [int(a) for a in (accessory_ids or [])]
    own_ids = {accessory.id for accessory in equipment.accessories}
    foreign = [a for a in accessory_ids if a not in own_ids]
    if foreign:
        raise RentalError('Acessório não pertence ao equipamento selecionado.')

    rental = Rental(
        user_id=user.id,
        equipment_id=equipment.id,
        rental_date=rental_date,
        rental_time=rental_time,
        expected_return_date=expected_return_date,
        accessories_taken=len(accessory_ids) > 0,
        accessories_list=accessory_ids,
        status='active'
    )
    db.session.add(rental)
    equipment.status = 'rented'
    db.session.flush()
    current_app.logger.info('Empréstimo %s: equipamento %s para usuário %s', rental.id, equipment.id, user.id)
    return rental


def return_rental(rental, return_date, return_time, observations=None):
    """Fecha o empréstimo e libera o equipamento. O commit é de quem chama."""
    if not rental.is_open:
        raise RentalError('Este empréstimo já foi devolvido.')
    rental.actual_return_date = return_date
    rental.actual_return_time = return_time
    rental.return_observations = (observations or '').strip() or None
    rental.status = 'returned'
    if rental.equipment is not None:
        rental.equipment.status = 'available'
    current_app.logger.info('Devolução do empréstimo %s', rental.id)
    return rental


def mark_overdue_rentals(today=None):
    """
    Marca como atrasados os empréstimos ativos com devolução prevista vencida.
    Não faz commit; o commit é de quem chama.
    """
    today = today or datetime.date.today()
    overdue = Rental.query.filter(
        Rental.status == 'active',
        Rental.expected_return_date.isnot(None),
        Rental.expected_return_date < today
    ).all()
    for rental in overdue:
        rental.status = 'overdue'
    if overdue:
        current_app.logger.info('%d empréstimo(s) marcados como atrasados', len(overdue))
    return overdue


def open_rentals_for(user):
    return user.rentals.filter(Rental.status.in_(OPEN_STATUSES)).order_by(Rental.created_at.desc()).all()


def closed_rentals_for(user):
    return user.rentals.filter(Rental.status == 'returned').order_by(Rental.created_at.desc()).all()


def accessory_names(rentals):
    """Mapeia id -> nome dos acessórios citados nos empréstimos informados."""
    ids = {a for rental in rentals for a in (rental.accessories_list or [])}
    if not ids:
        return {}
    return {a.id: a.name for a in Accessory.query.filter(Accessory.id.in_(ids)).all()}


def names_for(rental, names):
    # Acessórios recriados não existem mais; mostra o próprio id
    return [names.get(a, str(a)) for a in (rental.accessories_list or [])]


def dashboard_stats():
    total = Equipment.query.count()
    available = Equipment.query.filter_by(status='available').count()
    active = Rental.query.filter_by(status='active').count()
    return {
        'total_equipments': total,
        'active_rentals': active,
        'available_equipments': available,
    }
