import datetime

import pytest

from lending.extensions import db
from lending.models import Equipment, Profile, Rental
from lending.services import rental_service
from lending.services.equipment_service import update_equipment
from lending.services.report_service import rental_report, NOT_AVAILABLE


@pytest.fixture
def history(app, member_id, other_id, equipment_id, projector_id, make_rental):
    """Um empréstimo devolvido (Maria, notebook) e um ativo (João, projetor)."""
    returned_id = make_rental(member_id, equipment_id, rental_date=datetime.date(2026, 9, 1))
    with app.app_context():
        rental_service.return_rental(db.session.get(Rental, returned_id), datetime.date(2026, 9, 2),
                                     datetime.time(10, 0), 'Ok')
        db.session.commit()
    active_id = make_rental(other_id, projector_id, rental_date=datetime.date(2026, 10, 1))
    return {'returned': returned_id, 'active': active_id}


def test_report_is_newest_first(ctx, history):
    rows = rental_report()
    assert [row.id for row in rows] == [history['active'], history['returned']]
    assert rows[0].user_name == 'João Souza'
    assert rows[0].equipment_name == 'Projetor Epson'
    assert rows[1].return_observations == 'Ok'


@pytest.mark.parametrize('status,key', [('active', 'active'), ('returned', 'returned')])
def test_report_filters_by_status(ctx, history, status, key):
    assert [row.id for row in rental_report(status=status)] == [history[key]]


def test_report_rejects_unknown_status(ctx):
    with pytest.raises(ValueError):
        rental_report(status='perdido')


@pytest.mark.parametrize('search', ['maria', 'MARIA@EMPRESA', 'notebook'])
def test_report_search_is_case_insensitive(ctx, history, search):
    assert [row.id for row in rental_report(search=search)] == [history['returned']]


@pytest.mark.parametrize('search', ['JOÃO', 'projetor EPSON'])
def test_report_search_folds_accented_capitals(ctx, history, search):
    assert [row.user_name for row in rental_report(search=search)] == ['João Souza']


@pytest.mark.parametrize('search', ['_', '%'])
def test_report_search_treats_wildcards_literally(ctx, history, search):
    assert rental_report(search=search) == []


def test_report_without_profile_shows_not_available(ctx, history):
    rental = db.session.get(Rental, history['returned'])
    db.session.delete(db.session.get(Profile, rental.user_id))
    db.session.commit()

    row = next(r for r in rental_report() if r.id == history['returned'])
    assert row.user_name == NOT_AVAILABLE
    assert row.user_email == NOT_AVAILABLE


def test_report_keeps_accessory_ids_after_equipment_edit(ctx, member_id, equipment_id, make_rental):
    equipment = db.session.get(Equipment, equipment_id)
    ids = [a.id for a in equipment.accessories]
    make_rental(member_id, equipment_id, accessory_ids=ids)

    update_equipment(equipment, equipment.name, status='rented', accessories=[('Carregador', '90W')])
    db.session.commit()

    row = rental_report()[0]
    assert row.accessories_names == [str(i) for i in ids]


def test_reports_page(admin_client, history):
    response = admin_client.get('/admin/reports?status=all&search=jo%C3%A3o')
    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert body.count('class="rental-row"') == 1
    assert 'Projetor Epson' in body


def test_reports_page_empty_result(admin_client, history):
    body = admin_client.get('/admin/reports?search=inexistente').get_data(as_text=True)
    assert 'Nenhum empréstimo encontrado.' in body


def test_reports_page_invalid_status_falls_back(admin_client, history):
    body = admin_client.get('/admin/reports?status=perdido', follow_redirects=True).get_data(as_text=True)
    assert 'Filtro de status inválido.' in body
    assert body.count('class="rental-row"') == 2


def test_admin_registers_return(app, admin_client, history):
    response = admin_client.post(f"/admin/reports/{history['active']}/return", data={
        'return_date': '2026-10-04',
        'return_time': '11:00',
    })
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/reports')

    with app.app_context():
        rental = db.session.get(Rental, history['active'])
        assert rental.status == 'returned'
        assert rental.equipment.status == 'available'


def test_activity_page_lists_events(admin_client, history):
    body = admin_client.get('/admin/activity').get_data(as_text=True)
    assert 'Login' in body
