import datetime

from flask import current_app
from flask_mail import Message

from lending.extensions import mail
from lending.models.rental import Rental
from lending.services.rental_service import mark_overdue_rentals
from lending.utils import session_management


def build_reminder(user, rentals, today):
    """Monta o e-mail de lembrete de devolução para um usuário."""
    lines = [f'Olá, {user.display_name}!', '',
             'Os seguintes empréstimos estão com a devolução atrasada:', '']
    for rental in rentals:
        equipment_name = rental.equipment.name if rental.equipment else 'N/A'
        days = (today - rental.expected_return_date).days
        lines.append(
            f"- {equipment_name}: previsto para {rental.expected_return_date.strftime('%d/%m/%Y')} "
            f"({days} dia(s) de atraso)"
        )
    lines.extend(['', 'Por favor, registre a devolução o quanto antes.'])
    msg = Message('Lembrete: empréstimo em atraso', recipients=[user.email])
    msg.body = '\n'.join(lines)
    return msg


# --- FUNÇÃO PRINCIPAL DA TAREFA AGENDADA ---
def send_overdue_reminders(today=None):
    """
    Marca os empréstimos vencidos como atrasados e envia um lembrete por
    e-mail para cada usuário com empréstimo em atraso.
    Esta função deve ser executada automaticamente uma vez por dia.
    Retorna o número de lembretes enviados.
    """
    logger = current_app.logger
    today = today or datetime.date.today()
    logger.info('Iniciando tarefa agendada: empréstimos em atraso (%s)', today.isoformat())

    with session_management():
        newly_overdue = mark_overdue_rentals(today)

    overdue = Rental.query.filter_by(status='overdue').order_by(Rental.expected_return_date).all()
    if not overdue:
        logger.info('Nenhum empréstimo em atraso. Nenhuma ação necessária.')
        return 0

    by_user = {}
    for rental in overdue:
        by_user.setdefault(rental.user, []).append(rental)

    sent = 0
    for user, rentals in by_user.items():
        mail.send(build_reminder(user, rentals, today))
        sent += 1

    logger.info('%d novo(s) atraso(s), %d em atraso no total, %d lembrete(s) enviados',
                len(newly_overdue), len(overdue), sent)
    return sent


# --- EXECUÇÃO DO SCRIPT ---
if __name__ == '__main__':
    from lending import create_app

    app = create_app()
    with app.app_context():
        send_overdue_reminders()
