from lending.extensions import db
from lending.models.equipment import Equipment, Accessory, EQUIPMENT_STATUSES
from lending.models.rental import Rental


def _check_status(status):
    if status not in EQUIPMENT_STATUSES:
        raise ValueError(f'Status inválido: {status}')


def list_equipments():
    return Equipment.query.order_by(Equipment.created_at.desc(), Equipment.id.desc()).all()


def create_equipment(name, description=None, serial_number=None, status='available', accessories=None):
    _check_status(status)
    equipment = Equipment(
        name=name.strip(),
        description=description or None,
        serial_number=serial_number or None,
        status=status
    )
    for acc_name, acc_description in accessories or []:
        equipment.accessories.append(Accessory(name=acc_name, description=acc_description))
    db.session.add(equipment)
    return equipment


def update_equipment(equipment, name, description=None, serial_number=None, status=None, accessories=None):
    """
    Atualiza os dados do equipamento. Quando uma lista de acessórios é
    informada, os acessórios atuais são apagados e recriados.
    """
    equipment.name = name.strip()
    equipment.description = description or None
    equipment.serial_number = serial_number or None
    if status is not None:
        _check_status(status)
        equipment.status = status
    if accessories is not None:
        equipment.accessories.clear()
        db.session.flush()
        for acc_name, acc_description in accessories:
            equipment.accessories.append(Accessory(name=acc_name, description=acc_description))
    return equipment


def add_accessory(equipment, name, description=None):
    accessory = Accessory(name=name.strip(), description=description or None)
    equipment.accessories.append(accessory)
    return accessory


def delete_equipment(equipment):
    # O histórico de empréstimos é mantido sem o vínculo
    Rental.query.filter_by(equipment_id=equipment.id).update({'equipment_id': None})
    db.session.delete(equipment)
