import logging
from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine, select
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _error(status: int, title: str, detail: str):
    return {'error': {'status': status, 'title': title, 'detail': detail}}, status


def build_engine(config: Dict[str, Any]):
    db_url = config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        return create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith('sqlite'):
        return create_engine(db_url, echo=False, future=True)
    connect_args = {}
    if db_url.startswith('postgres'):
        connect_args['options'] = f"-c statement_timeout={config['DB_STATEMENT_TIMEOUT_MS']}"
    return create_engine(
        db_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=config['DB_POOL_SIZE'],
        max_overflow=config['DB_MAX_OVERFLOW'],
        pool_timeout=config['DB_POOL_TIMEOUT'],
        connect_args=connect_args,
    )


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    from .config.settings import load_settings

    app = Flask(__name__)
    app.config.update(load_settings())
    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.getLogger('partsdesk').setLevel(app.config['LOG_LEVEL'])
    if not logging.getLogger().handlers:
        logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # Database
    db_engine = build_engine(app.config)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)

    from .services.bootstrap import SchemaBootstrapper
    bootstrapper = SchemaBootstrapper.from_config(db_engine, app.config)
    app.extensions['partsdesk.bootstrapper'] = bootstrapper
    if app.config['BOOTSTRAP_ON_START']:
        app.extensions['partsdesk.bootstrap_report'] = bootstrapper.bootstrap()

    from .routes.auth import auth_bp
    from .routes.users import users_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(users_bp, url_prefix='/users')

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok', 'schema_version': bootstrapper.current_version()}

    _register_jwt_callbacks()

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error(e.code, e.name, e.description)
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return _error(500, 'Internal Server Error', 'Unexpected error')

    return app


def _register_jwt_callbacks():
    from .models.account import RevokedToken

    @jwt.token_in_blocklist_loader
    def is_revoked(jwt_header, jwt_payload):
        session = get_db()
        return session.execute(select(RevokedToken.id).where(RevokedToken.jti == jwt_payload['jti'])).first() is not None

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _error(401, 'Unauthorized', reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _error(401, 'Unauthorized', reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _error(401, 'Unauthorized', 'Token has expired')

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return _error(401, 'Unauthorized', 'Token has been revoked')


def get_db():
    return SessionLocal()
