import os
import tempfile

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ.setdefault('APP_LOG_DIR', tempfile.mkdtemp(prefix='organizador-test-logs-'))

import pytest

from organizador import app, db


@pytest.fixture(autouse=True)
def banco_limpo():
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield
    with app.app_context():
        db.session.remove()


@pytest.fixture
def client():
    return app.test_client()
