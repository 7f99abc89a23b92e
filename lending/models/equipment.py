import datetime
from lending.extensions import db

EQUIPMENT_STATUSES = ('available', 'rented', 'maintenance')


class Equipment(db.Model):
    __tablename__ = 'equipments'
    # Ids nunca são reaproveitados: o histórico de empréstimos guarda ids
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text)
    serial_number = db.Column(db.String(100))
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('available','rented','maintenance')", name='ck_equipments_status'),
        nullable=False,
        default='available',
        index=True
    )
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    accessories = db.relationship('Accessory', backref='equipment', cascade='all, delete-orphan',
                                  order_by='Accessory.id')
    rentals = db.relationship('Rental', backref='equipment', lazy='dynamic')

    @property
    def is_available(self):
        return self.status == 'available'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'serial_number': self.serial_number,
            'status': self.status,
        }

    def __repr__(self):
        return f"Equipment('{self.name}', '{self.status}')"


class Accessory(db.Model):
    __tablename__ = 'accessories'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    equipment_id = db.Column(db.Integer, db.ForeignKey('equipments.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'equipment_id': self.equipment_id,
            'name': self.name,
            'description': self.description,
        }

    def __repr__(self):
        return f"Accessory('{self.name}')"
