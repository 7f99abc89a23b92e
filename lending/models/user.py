from lending.extensions import db, bcrypt, login_manager
from flask_login import UserMixin
import datetime
from itsdangerous import URLSafeTimedSerializer as Serializer
from itsdangerous import BadSignature, SignatureExpired
from flask import current_app

ROLES = ('admin', 'user')


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


# --- Modelos ---
class User(db.Model, UserMixin):
    """Identidade de autenticação (e-mail e senha)."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(150), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    profile = db.relationship('Profile', backref='user', uselist=False)
    rentals = db.relationship('Rental', backref='user', lazy='dynamic')

    def __repr__(self):
        return f"User('{self.email}')"

    @property
    def is_admin(self):
        return self.profile is not None and self.profile.role == 'admin'

    @property
    def display_name(self):
        return self.profile.name if self.profile else self.email

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def get_reset_token(self):
        s = Serializer(current_app.config['SECRET_KEY'], salt='password-reset')
        return s.dumps({'user_id': self.id})

    @staticmethod
    def verify_reset_token(token):
        s = Serializer(current_app.config['SECRET_KEY'], salt='password-reset')
        try:
            user_id = s.loads(token, max_age=current_app.config['RESET_TOKEN_MAX_AGE'])['user_id']
        except (BadSignature, SignatureExpired, KeyError):
            return None
        return db.session.get(User, user_id)


class Profile(db.Model):
    """Registro de aplicação do usuário: nome, e-mail exibido e papel."""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, db.ForeignKey('users.id'), primary_key=True)
    email = db.Column(db.String(150), nullable=False)
    name = db.Column(db.String(150), nullable=False)
    role = db.Column(
        db.String(10),
        db.CheckConstraint("role IN ('admin','user')", name='ck_profiles_role'),
        nullable=False,
        default='user'
    )
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def __repr__(self):
        return f"Profile('{self.name}' , '{self.email}', '{self.role}')"


class ActivityLog(db.Model):
    __tablename__ = 'activity_log'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=datetime.datetime.utcnow, index=True)
    event_type = db.Column(db.String(100), index=True)
    status = db.Column(db.String(50), index=True)
    details = db.Column(db.Text)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    ip_address = db.Column(db.String(45))

    user = db.relationship('User')
