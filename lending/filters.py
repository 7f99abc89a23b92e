EQUIPMENT_STATUS_LABELS = {
    'available': 'Disponível',
    'rented': 'Emprestado',
    'maintenance': 'Manutenção',
}

RENTAL_STATUS_LABELS = {
    'active': 'Ativo',
    'returned': 'Devolvido',
    'overdue': 'Atrasado',
}

ROLE_LABELS = {
    'admin': 'Administrador',
    'user': 'Usuário',
}


def format_date(value):
    """Formata datas no padrão dd/mm/aaaa."""
    if value is None:
        return '-'
    return value.strftime('%d/%m/%Y')


def format_time(value):
    if value is None:
        return ''
    return value.strftime('%H:%M')


def equipment_status_label(status):
    return EQUIPMENT_STATUS_LABELS.get(status, status)


def rental_status_label(status):
    return RENTAL_STATUS_LABELS.get(status, status)


def role_label(role):
    return ROLE_LABELS.get(role, role)


def register_filters(app):
    """Registra os filtros Jinja2 usados nos templates."""
    app.jinja_env.filters['format_date'] = format_date
    app.jinja_env.filters['format_time'] = format_time
    app.jinja_env.filters['equipment_status'] = equipment_status_label
    app.jinja_env.filters['rental_status'] = rental_status_label
    app.jinja_env.filters['role_label'] = role_label
