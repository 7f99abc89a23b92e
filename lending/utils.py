# lending/utils.py
from contextlib import contextmanager
import datetime

from lending.extensions import db


# --- Context Manager para commit/rollback das escritas ---
@contextmanager
def session_management():
    """Confirma a sessão ao final do bloco; desfaz e repropaga em caso de erro."""
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def now_local():
    """Data e hora atuais sem segundos, como os campos de data/hora dos formulários."""
    now = datetime.datetime.now()
    return now.date(), now.time().replace(second=0, microsecond=0)


def parse_accessory_lines(text):
    """
    Converte o texto do formulário de equipamento em uma lista de acessórios.
    Cada linha não vazia vira um acessório; o separador '|' divide nome e descrição.
    Exemplo:
        Input: "Carregador | 65W\\nBolsa"
        Output: [('Carregador', '65W'), ('Bolsa', None)]
    """
    accessories = []
    if not text:
        return accessories
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        name, _, description = line.partition('|')
        name = name.strip()
        description = description.strip() or None
        if name:
            accessories.append((name, description))
    return accessories


def format_accessory_lines(accessories):
    lines = []
    for accessory in accessories:
        if accessory.description:
            lines.append(f'{accessory.name} | {accessory.description}')
        else:
            lines.append(accessory.name)
    return '\n'.join(lines)
