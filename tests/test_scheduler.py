import datetime

from lending.extensions import db, mail
from lending.models import Rental
from lending.services.equipment_service import create_equipment

from scheduler import send_overdue_reminders

from conftest import MEMBER_EMAIL, OTHER_EMAIL


def test_no_overdue_rentals_sends_nothing(ctx, member_id, equipment_id, make_rental):
    make_rental(member_id, equipment_id, expected_return_date=datetime.date(2026, 10, 30))

    with mail.record_messages() as outbox:
        assert send_overdue_reminders(datetime.date(2026, 10, 10)) == 0
    assert outbox == []


def test_sends_one_reminder_per_user(ctx, member_id, other_id, equipment_id, projector_id, make_rental):
    camera = create_equipment('Câmera Canon')
    db.session.commit()
    late_id = make_rental(member_id, equipment_id, expected_return_date=datetime.date(2026, 10, 3))
    make_rental(member_id, projector_id, expected_return_date=datetime.date(2026, 10, 4))
    make_rental(other_id, camera.id, expected_return_date=datetime.date(2026, 10, 8))

    with mail.record_messages() as outbox:
        sent = send_overdue_reminders(datetime.date(2026, 10, 10))

    assert sent == 2
    by_recipient = {message.recipients[0]: message for message in outbox}
    assert set(by_recipient) == {MEMBER_EMAIL, OTHER_EMAIL}

    body = by_recipient[MEMBER_EMAIL].body
    assert 'Maria Silva' in body
    assert 'Notebook Dell: previsto para 03/10/2026 (7 dia(s) de atraso)' in body
    assert 'Projetor Epson' in body
    assert 'Câmera Canon' in by_recipient[OTHER_EMAIL].body
    assert db.session.get(Rental, late_id).status == 'overdue'


def test_returned_rentals_are_not_reminded(ctx, member_id, equipment_id, make_rental):
    rental_id = make_rental(member_id, equipment_id, expected_return_date=datetime.date(2026, 10, 3))
    rental = db.session.get(Rental, rental_id)
    rental.status = 'returned'
    db.session.commit()

    with mail.record_messages() as outbox:
        assert send_overdue_reminders(datetime.date(2026, 10, 10)) == 0
    assert outbox == []


def test_reminder_job_persists_overdue_status(ctx, member_id, equipment_id, make_rental):
    rental_id = make_rental(member_id, equipment_id, expected_return_date=datetime.date(2026, 10, 3))

    with mail.record_messages():
        send_overdue_reminders(datetime.date(2026, 10, 10))
    db.session.rollback()

    assert db.session.get(Rental, rental_id).status == 'overdue'
