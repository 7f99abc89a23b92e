from dataclasses import dataclass, field
import datetime
from typing import List, Optional

from lending.extensions import db
from lending.models.equipment import Equipment
from lending.models.rental import Rental, RENTAL_STATUSES
from lending.models.user import Profile
from lending.services.rental_service import accessory_names, names_for

NOT_AVAILABLE = 'N/A'


@dataclass
class RentalReportRow:
    id: int
    user_name: str
    user_email: str
    equipment_name: str
    equipment_description: Optional[str]
    rental_date: datetime.date
    rental_time: datetime.time
    expected_return_date: Optional[datetime.date]
    actual_return_date: Optional[datetime.date]
    actual_return_time: Optional[datetime.time]
    accessories_taken: bool
    status: str
    return_observations: Optional[str] = None
    accessories_names: List[str] = field(default_factory=list)

    @property
    def is_open(self):
        return self.status != 'returned'


def _matches(term, profile, equipment):
    fields = [profile.name, profile.email] if profile else []
    if equipment:
        fields.append(equipment.name)
    return any(term in (value or '').casefold() for value in fields)


def rental_report(status='all', search=''):
    """
    Lista os empréstimos do mais recente para o mais antigo, com nome/e-mail do
    usuário, equipamento e acessórios. Filtra por status e por busca sem
    diferenciar maiúsculas (nome do usuário, equipamento ou e-mail).
    """
    query = (db.session.query(Rental, Profile, Equipment)
             .outerjoin(Profile, Profile.id == Rental.user_id)
             .outerjoin(Equipment, Equipment.id == Rental.equipment_id))

    if status and status != 'all':
        if status not in RENTAL_STATUSES:
            raise ValueError(f'Status inválido: {status}')
        query = query.filter(Rental.status == status)

    results = query.order_by(Rental.created_at.desc(), Rental.id.desc()).all()

    # Busca literal, sem diferenciar maiúsculas (inclusive letras acentuadas)
    term = (search or '').strip().casefold()
    if term:
        results = [(rental, profile, equipment) for rental, profile, equipment in results
                   if _matches(term, profile, equipment)]
    names = accessory_names([rental for rental, _, _ in results])

    rows = []
    for rental, profile, equipment in results:
        rows.append(RentalReportRow(
            id=rental.id,
            user_name=profile.name if profile else NOT_AVAILABLE,
            user_email=profile.email if profile else NOT_AVAILABLE,
            equipment_name=equipment.name if equipment else NOT_AVAILABLE,
            equipment_description=equipment.description if equipment else None,
            rental_date=rental.rental_date,
            rental_time=rental.rental_time,
            expected_return_date=rental.expected_return_date,
            actual_return_date=rental.actual_return_date,
            actual_return_time=rental.actual_return_time,
            accessories_taken=rental.accessories_taken,
            status=rental.status,
            return_observations=rental.return_observations,
            accessories_names=names_for(rental, names),
        ))
    return rows
