import datetime
from lending.extensions import db

RENTAL_STATUSES = ('active', 'returned', 'overdue')
OPEN_STATUSES = ('active', 'overdue')


class Rental(db.Model):
    __tablename__ = 'rentals'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    # Fica nulo quando o equipamento é excluído; o histórico permanece
    equipment_id = db.Column(db.Integer, db.ForeignKey('equipments.id'), nullable=True, index=True)

    rental_date = db.Column(db.Date, nullable=False, index=True)
    rental_time = db.Column(db.Time, nullable=False)
    expected_return_date = db.Column(db.Date)
    actual_return_date = db.Column(db.Date)
    actual_return_time = db.Column(db.Time)

    accessories_taken = db.Column(db.Boolean, default=False, nullable=False)
    accessories_list = db.Column(db.JSON, default=list)
    return_observations = db.Column(db.Text)

    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('active','returned','overdue')", name='ck_rentals_status'),
        nullable=False,
        default='active',
        index=True
    )
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    @property
    def is_open(self):
        return self.status in OPEN_STATUSES

    def __repr__(self):
        return f"Rental(User: {self.user_id}, Equipment: {self.equipment_id}, Status: {self.status})"
