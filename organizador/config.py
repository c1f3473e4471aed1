import os
import logging

logger = logging.getLogger(__name__)


def _get_int_env(var_name: str, default: int) -> int:
    """Safely parse integer environment variables with defaults."""
    value = os.getenv(var_name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _database_uri(instance_path: str) -> str:
    """Resolve the SQLAlchemy URI from ``DATABASE_URL`` or the ``DB_*`` variables."""
    database_url = os.getenv('DATABASE_URL')
    if database_url:
        return database_url

    db_user = os.getenv('DB_USER')
    db_password = os.getenv('DB_PASSWORD')
    db_host = os.getenv('DB_HOST')
    db_name = os.getenv('DB_NAME')

    missing_db_vars = [
        name for name, value in (
            ('DB_USER', db_user),
            ('DB_PASSWORD', db_password),
            ('DB_HOST', db_host),
            ('DB_NAME', db_name),
        )
        if value is None
    ]

    if missing_db_vars:
        logger.warning(
            "Variáveis de banco ausentes (%s); usando SQLite local em modo de fallback.",
            ", ".join(missing_db_vars),
        )
        os.makedirs(instance_path, exist_ok=True)
        return f"sqlite:///{os.path.join(instance_path, 'organizador.db')}"

    if db_password == "":
        logger.warning("DB_PASSWORD está vazio; conectando ao MySQL sem senha (apenas recomendado para desenvolvimento local).")
    return f"mysql+pymysql://{db_user}:{db_password}@{db_host}/{db_name}"


class Config:
    """Application configuration."""
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SLOW_REQUEST_THRESHOLD_MS = float(os.getenv('SLOW_REQUEST_THRESHOLD_MS', '750'))
    SLOW_QUERY_THRESHOLD_MS = float(os.getenv('SLOW_QUERY_THRESHOLD_MS', '1000'))
    APP_LOG_DIR = os.getenv('APP_LOG_DIR')
    APP_VERSION = os.getenv('APP_VERSION')

    COMPRESS_MIMETYPES = ['application/json']
    COMPRESS_LEVEL = 6
    COMPRESS_MIN_SIZE = 500

    @classmethod
    def init_app(cls, app) -> None:
        """Copy the settings onto ``app.config`` and resolve the database engine."""
        app.config.from_object(cls)

        database_uri = _database_uri(app.instance_path)
        app.config['SQLALCHEMY_DATABASE_URI'] = database_uri

        engine_options = app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {})
        # SQLite usa StaticPool/NullPool, que nao aceitam opcoes de pool
        if not database_uri.startswith('sqlite'):
            engine_options.setdefault('pool_pre_ping', True)
            engine_options.setdefault('pool_recycle', 1800)
            engine_options.setdefault('pool_size', _get_int_env('DB_POOL_SIZE', 10))
            engine_options.setdefault('max_overflow', _get_int_env('DB_MAX_OVERFLOW', 20))
            engine_options.setdefault('pool_timeout', 30)

        cls.validate(app)

    @classmethod
    def validate(cls, app) -> None:
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite') and not app.testing:
            logger.info("Usando SQLite: %s", app.config['SQLALCHEMY_DATABASE_URI'])
        if cls.SLOW_REQUEST_THRESHOLD_MS <= 0:
            logger.warning("SLOW_REQUEST_THRESHOLD_MS <= 0 - log de requisicoes lentas desativado")
