import os, sys, pytest
# Ensure backend directory is on path so 'partsdesk' can be imported without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from partsdesk import create_app
from partsdesk.services.admin_seed import AdminSeeder
from partsdesk.services.bootstrap import SchemaBootstrapper

TEST_CONFIG = {
    'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
    'JWT_SECRET_KEY': 'test-secret-key-with-enough-length-for-hs256',
    'BOOTSTRAP_ON_START': True,
    'ADMIN_BOOTSTRAP_PASSWORD': 'admin',
    'LEGACY_LOGIN_UPGRADE': False,
}


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    # Bootstrap runs inside create_app: schema + admin account exist for every test
    app = create_app(TEST_CONFIG)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def engine():
    """A private empty store, independent of the app's database."""
    eng = create_engine('sqlite+pysqlite:///:memory:', connect_args={'check_same_thread': False}, poolclass=StaticPool)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture()
def bootstrapper(engine, session_factory):
    return SchemaBootstrapper(engine, AdminSeeder(session_factory, password='admin'))


