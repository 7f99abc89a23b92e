import os
from dotenv import load_dotenv

# Carrega as variáveis de ambiente do arquivo .env
load_dotenv()

# Define o caminho base do projeto
basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """Classe de configuração base."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'voce-precisa-mudar-isso'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'lending.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- E-MAIL (recuperação de senha e avisos de atraso) ---
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER') or 'emprestimos@localhost'

    # --- Administrador principal ---
    PROTECTED_ADMIN_EMAIL = os.environ.get('PROTECTED_ADMIN_EMAIL', 'admin@admin.com')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'admin123')

    RESET_TOKEN_MAX_AGE = 1800
    USERS_PER_PAGE = 15
    RENTALS_PER_PAGE = 25

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    LOG_LEVEL = 'WARNING'


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'default': Config
}
