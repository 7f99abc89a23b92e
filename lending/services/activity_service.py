import json

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from lending.extensions import db
from lending.models.user import ActivityLog


def log_event(event_type, status, details, user_id=None, ip_address=None):
    """Função central para registrar eventos na trilha de auditoria."""
    current_app.logger.info('%s [%s] user=%s %s', event_type, status, user_id, details)
    try:
        log_entry = ActivityLog(
            event_type=event_type,
            status=status,
            details=json.dumps(details, ensure_ascii=False, default=str),
            user_id=user_id,
            ip_address=ip_address
        )
        db.session.add(log_entry)
        db.session.commit()
    except SQLAlchemyError:
        current_app.logger.exception('Erro ao salvar log de atividade: %s', event_type)
        db.session.rollback()


def recent_activity(page, per_page):
    return ActivityLog.query.order_by(ActivityLog.timestamp.desc()).paginate(
        page=page, per_page=per_page, error_out=False)
