from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    from wordlobby.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Caller identity arrives with every request; there is no login flow
    from wordlobby.auth import load_caller_from_request, reject_anonymous_caller
    login_manager.request_loader(load_caller_from_request)
    login_manager.unauthorized_handler(reject_anonymous_caller)

    from wordlobby.main import main
    flask_app.register_blueprint(main)

    from wordlobby.api.lobbies import lobbies
    flask_app.register_blueprint(lobbies, url_prefix='/api/lobbies')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the document table."""
        import wordlobby.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
