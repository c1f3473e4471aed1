"""Flask application module and common utilities."""

import logging
import time
import uuid

import click
from flask import Flask, request, g
from flask_compress import Compress
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv

load_dotenv()

from organizador.config import Config

app = Flask(__name__)

logger = logging.getLogger(__name__)

Config.init_app(app)
app.json.sort_keys = False

db = SQLAlchemy(app)

# Compressão HTTP para respostas JSON grandes (listagens)
compress = Compress(app)


@app.before_request
def _start_request_timer():
    """Store the request id and high-resolution start time for request logging."""
    g.request_started_at = time.perf_counter()
    g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    request.environ["request_id"] = g.request_id


@app.after_request
def _log_request_end(response):
    """Log request completion with timing information."""
    started_at = getattr(g, 'request_started_at', None)
    duration_ms = (time.perf_counter() - started_at) * 1000 if started_at is not None else 0.0
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers.setdefault("X-Request-ID", request_id)
    log_request_info(request, response, duration_ms, request_id=request_id)
    return response


@app.after_request
def _set_security_headers(response):
    """Apply security-related HTTP headers to responses."""
    response.headers.setdefault('X-Content-Type-Options', 'nosniff')
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
    return response


# Importa rotas e modelos depois da criação do db
from organizador.models import tables  # noqa: F401
from organizador.controllers import routes
routes.register_blueprints(app)

with app.app_context():
    # ``tables`` ja importado: o metadata conhece todas as tabelas
    db.create_all()

    # Setup structured logging with rotation (needs db.engine for slow queries)
    from organizador.utils.logging_config import setup_logging, log_request_info

    setup_logging(app, db.engine)


@app.cli.command("init-db")
def init_db_command():
    """Cria as tabelas do banco de dados."""
    db.create_all()
    logger.info("Tabelas criadas em %s", app.config['SQLALCHEMY_DATABASE_URI'])
    click.echo("Banco de dados inicializado.")
