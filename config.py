import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Flask application configuration."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')

    # Database
    # Heroku uses postgres:// but SQLAlchemy requires postgresql://
    _database_url = os.environ.get('DATABASE_URL', 'sqlite:///coating.db')
    if _database_url.startswith('postgres://'):
        _database_url = _database_url.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = _database_url
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Generation
    GCODE_OUTPUT_DIR = os.environ.get('GCODE_OUTPUT_DIR', 'output')
    DEFAULT_PIXELS_PER_MM = float(os.environ.get('DEFAULT_PIXELS_PER_MM', 10.0))
