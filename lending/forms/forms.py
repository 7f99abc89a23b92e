from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, TextAreaField, SelectField, SelectMultipleField, PasswordField, TimeField, DateField
from wtforms.validators import DataRequired, Email, Optional, Length, ValidationError
from wtforms_sqlalchemy.fields import QuerySelectField
from wtforms.widgets import CheckboxInput, ListWidget

from lending.models.equipment import Equipment, Accessory
from lending.services.rental_service import available_equipments

EQUIPMENT_STATUS_CHOICES = [
    ('available', 'Disponível'),
    ('rented', 'Emprestado'),
    ('maintenance', 'Manutenção'),
]

ROLE_CHOICES = [('user', 'Usuário'), ('admin', 'Administrador')]

REPORT_STATUS_CHOICES = [
    ('all', 'Todos'),
    ('active', 'Ativos'),
    ('returned', 'Devolvidos'),
    ('overdue', 'Atrasados'),
]


class MultiCheckboxField(SelectMultipleField):
    widget = ListWidget(prefix_label=False)
    option_widget = CheckboxInput()


# Formulário para criar/editar equipamento
class EquipmentForm(FlaskForm):
    name = StringField('Nome', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Descrição')
    serial_number = StringField('Número de Série', validators=[Optional(), Length(max=100)])
    status = SelectField('Status', choices=EQUIPMENT_STATUS_CHOICES, default='available')
    # Um acessório por linha: "nome | descrição"
    accessory_lines = TextAreaField('Acessórios (um por linha: nome | descrição)')
    submit = SubmitField('Salvar Equipamento')


# Formulário para adicionar acessório a um equipamento
class AccessoryForm(FlaskForm):
    equipment = QuerySelectField('Equipamento',
                                 query_factory=lambda: Equipment.query.order_by(Equipment.name),
                                 get_label='name',
                                 allow_blank=False,
                                 validators=[DataRequired()])
    name = StringField('Nome do Acessório', validators=[DataRequired(), Length(max=100)])
    description = TextAreaField('Descrição')
    submit = SubmitField('Salvar Acessório')


# Formulário de novo empréstimo
class RentalForm(FlaskForm):
    equipment = QuerySelectField('Equipamento',
                                 query_factory=available_equipments,
                                 get_label='name',
                                 allow_blank=True,
                                 blank_text='Selecione um equipamento...',
                                 validators=[DataRequired(message='Selecione um equipamento.')])
    accessories = MultiCheckboxField('Acessórios', coerce=int, validators=[Optional()])
    rental_date = DateField('Data do Empréstimo', format='%Y-%m-%d', validators=[DataRequired()])
    rental_time = TimeField('Hora do Empréstimo', format='%H:%M', validators=[DataRequired()])
    expected_return_date = DateField('Data Prevista de Devolução', format='%Y-%m-%d', validators=[Optional()])
    submit = SubmitField('Registrar Empréstimo')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.accessories.choices = [(a.id, a.name) for a in Accessory.query.order_by(Accessory.name).all()]

    def validate_expected_return_date(self, field):
        if field.data and self.rental_date.data and field.data < self.rental_date.data:
            raise ValidationError('A devolução prevista não pode ser anterior ao empréstimo.')


# Formulário de devolução
class ReturnForm(FlaskForm):
    return_date = DateField('Data de Devolução', format='%Y-%m-%d', validators=[DataRequired()])
    return_time = TimeField('Hora de Devolução', format='%H:%M', validators=[DataRequired()])
    observations = TextAreaField('Observações')
    submit = SubmitField('Registrar Devolução')


# Formulário de usuário (admin)
class AdminUserForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    name = StringField('Nome', validators=[DataRequired(), Length(max=150)])
    password = PasswordField('Senha', validators=[Optional(), Length(min=6, message='A senha deve ter no mínimo 6 caracteres.')])
    role = SelectField('Função', choices=ROLE_CHOICES, default='user')
    submit = SubmitField('Salvar')


# Formulário de edição do próprio perfil
class ProfileForm(FlaskForm):
    name = StringField('Nome', validators=[DataRequired(), Length(max=150)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    submit = SubmitField('Atualizar Perfil')
