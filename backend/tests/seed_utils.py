"""Shared helpers for seeding accounts and logging in from tests."""
from partsdesk import get_db
from partsdesk.models.account import User


def make_user(username: str, role: str, password: str = 'pw', is_active: bool = True) -> str:
    """Insert an account directly and return its id."""
    session = get_db()
    user = User(username=username, role=role, first_name='Test', last_name=username, is_active=is_active)
    user.set_password(password)
    session.add(user)
    session.commit()
    return user.id


def login(client, username: str, password: str) -> str:
    resp = client.post('/auth/login', json={'username': username, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()['access_token']


def auth_headers(client, username: str, password: str):
    return {'Authorization': f'Bearer {login(client, username, password)}'}


__all__ = ['make_user', 'login', 'auth_headers']
