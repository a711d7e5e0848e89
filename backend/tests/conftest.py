import os
import sys
import pytest

# Ensure the backend root (containing the `wordlobby` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordlobby import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CALLER_ID_HEADER = 'X-Caller-Id'
    LOBBY_CODE_EXPIRY_MS = 3600000
    LOBBY_CODE_MAX_ATTEMPTS = 1000
    STORE_TRANSACTION_MAX_RETRIES = 25
    START_WORD = 'password'
    TARGET_WORDS = ['quick', 'brown', 'fox', 'jump', 'dog']
    SUBMISSION_ROUNDS = 1


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordlobby.models  # noqa: F401
        db.create_all()
    # No context stays pushed: each test-client request gets its own, so the
    # caller loaded by Flask-Login does not leak between requests.
    yield application
    with application.app_context():
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """For calling services directly instead of through HTTP."""
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def as_caller(client):
    """Issue requests as a given caller identity: as_caller('alice').post(...)."""
    class _CallerClient:
        def __init__(self, caller_id):
            self.headers = {'X-Caller-Id': caller_id}

        def get(self, url, **kwargs):
            return client.get(url, headers=self.headers, **kwargs)

        def post(self, url, **kwargs):
            return client.post(url, headers=self.headers, **kwargs)

    return _CallerClient


@pytest.fixture()
def make_player():
    def _make(name, color=0, emoji=0):
        return {'displayName': name, 'colorNumber': color, 'emojiNumber': emoji}
    return _make
