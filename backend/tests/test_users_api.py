from sqlalchemy import select, update
from partsdesk import get_db
from partsdesk.models.account import User
from partsdesk.models.audit import AuditLog
from seed_utils import make_user, auth_headers


def _owner(client):
    return auth_headers(client, 'admin', 'admin')


def test_requires_authentication_and_owner_role(client):
    resp = client.get('/users')
    assert resp.status_code == 401
    assert resp.get_json()['error']['detail'] == 'Authentication required'

    make_user('users_cs', 'customer_service')
    resp = client.get('/users', headers=auth_headers(client, 'users_cs', 'pw'))
    assert resp.status_code == 403
    assert resp.get_json()['error']['detail'] == 'Role not permitted'


def test_create_get_update_delete(client):
    headers = _owner(client)
    resp = client.post('/users', json={
        'username': 'users_crud', 'password': 'pw1', 'first_name': 'Rana', 'last_name': 'Adel',
        'role': 'sorter',
    }, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    created = resp.get_json()
    assert created['role'] == 'sorter'
    assert created['is_active'] is True
    user_id = created['id']

    resp = client.get(f'/users/{user_id}', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['username'] == 'users_crud'

    resp = client.put(f'/users/{user_id}', json={'role': 'stock_manager', 'password': 'pw2'}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['role'] == 'stock_manager'
    login = client.post('/auth/login', json={'username': 'users_crud', 'password': 'pw2'})
    assert login.status_code == 200

    resp = client.delete(f'/users/{user_id}', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {'message': 'User deleted successfully', 'username': 'users_crud'}
    assert client.get(f'/users/{user_id}', headers=headers).status_code == 404


def test_create_validation(client):
    headers = _owner(client)
    resp = client.post('/users', json={'username': 'users_partial'}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'missing fields: password, first_name, last_name'

    payload = {'username': 'users_badrole', 'password': 'pw', 'first_name': 'A', 'last_name': 'B', 'role': 'janitor'}
    resp = client.post('/users', json=payload, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'Unknown role: janitor'

    payload['username'] = 'admin'
    payload['role'] = 'sorter'
    resp = client.post('/users', json=payload, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'username exists'


def test_default_role_applied(client):
    resp = client.post('/users', json={
        'username': 'users_default_role', 'password': 'pw', 'first_name': 'A', 'last_name': 'B',
    }, headers=_owner(client))
    assert resp.status_code == 201
    assert resp.get_json()['role'] == 'customer_service'


def test_list_paginates(client):
    for i in range(3):
        make_user(f'users_page_{i}', 'sorter')
    resp = client.get('/users?limit=2&offset=0', headers=_owner(client))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['pagination']['limit'] == 2
    assert body['pagination']['returned'] == 2
    assert body['pagination']['total'] >= 4
    assert client.get('/users?limit=abc', headers=_owner(client)).status_code == 400


def test_mutations_are_audited_with_diff(client):
    headers = _owner(client)
    user_id = make_user('users_audited', 'receptionist')
    resp = client.put(f'/users/{user_id}', json={'role': 'sorter', 'is_active': False}, headers=headers)
    assert resp.status_code == 200

    entry = get_db().execute(
        select(AuditLog).where(AuditLog.action == 'USER.UPDATE', AuditLog.entity_id == user_id)
    ).scalar_one()
    assert entry.entity == 'User'
    assert entry.role_snapshot == 'owner'
    assert entry.meta['changes']['role'] == {'before': 'receptionist', 'after': 'sorter'}
    assert entry.meta['changes']['is_active'] == {'before': True, 'after': False}


def test_failed_mutation_not_audited(client):
    resp = client.put('/users/does-not-exist', json={'role': 'sorter'}, headers=_owner(client))
    assert resp.status_code == 404
    assert resp.get_json()['error']['detail'] == 'User not found'
    rows = get_db().execute(
        select(AuditLog).where(AuditLog.entity_id == 'does-not-exist')
    ).scalars().all()
    assert rows == []


def test_last_active_owner_is_protected(client):
    session = get_db()
    session.execute(
        update(User).where(User.role == 'owner', User.username != 'admin').values(is_active=False)
    )
    session.commit()
    admin_id = session.execute(select(User.id).where(User.username == 'admin')).scalar_one()
    headers = _owner(client)

    resp = client.put(f'/users/{admin_id}', json={'role': 'sorter'}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'Cannot remove last active owner'
    resp = client.put(f'/users/{admin_id}', json={'is_active': False}, headers=headers)
    assert resp.status_code == 400
    resp = client.delete(f'/users/{admin_id}', headers=headers)
    assert resp.status_code == 400

    # with a second active owner the change is allowed
    second_id = make_user('users_owner_two', 'owner')
    resp = client.put(f'/users/{second_id}', json={'role': 'sorter'}, headers=headers)
    assert resp.status_code == 200


def test_disabled_owner_token_loses_access(client):
    owner_id = make_user('users_owner_disabled', 'owner')
    stale = auth_headers(client, 'users_owner_disabled', 'pw')
    assert client.get('/users', headers=stale).status_code == 200

    resp = client.put(f'/users/{owner_id}', json={'is_active': False}, headers=_owner(client))
    assert resp.status_code == 200

    assert client.get('/users', headers=stale).status_code == 401
    resp = client.post('/users', json={
        'username': 'users_smuggled_owner', 'password': 'pw', 'first_name': 'A', 'last_name': 'B',
        'role': 'owner',
    }, headers=stale)
    assert resp.status_code == 401
    assert get_db().execute(select(User.id).where(User.username == 'users_smuggled_owner')).first() is None


def test_demoted_owner_token_loses_owner_routes(client):
    owner_id = make_user('users_owner_demoted', 'owner')
    stale = auth_headers(client, 'users_owner_demoted', 'pw')

    resp = client.put(f'/users/{owner_id}', json={'role': 'sorter'}, headers=_owner(client))
    assert resp.status_code == 200

    resp = client.get('/users', headers=stale)
    assert resp.status_code == 403
    body = client.get('/auth/access?path=/finance', headers=stale).get_json()
    assert body['decision'] == 'redirect_home'
    nav = client.get('/auth/navigation', headers=stale).get_json()
    assert nav['role'] == 'sorter'


def test_update_rejects_null_required_fields(client):
    headers = _owner(client)
    user_id = make_user('users_nulls', 'sorter')
    for field in ('first_name', 'last_name', 'username'):
        resp = client.put(f'/users/{user_id}', json={field: None}, headers=headers)
        assert resp.status_code == 400
        assert resp.get_json()['error']['detail'] == f'{field} must be a non-empty string'
    resp = client.put(f'/users/{user_id}', json={'first_name': '  '}, headers=headers)
    assert resp.status_code == 400
    assert client.get(f'/users/{user_id}', headers=headers).get_json()['first_name'] == 'Test'


def test_is_active_must_be_boolean(client):
    headers = _owner(client)
    user_id = make_user('users_flag', 'sorter')
    resp = client.put(f'/users/{user_id}', json={'is_active': 'false'}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'is_active must be a boolean'
    assert client.get(f'/users/{user_id}', headers=headers).get_json()['is_active'] is True

    resp = client.post('/users', json={
        'username': 'users_flag_new', 'password': 'pw', 'first_name': 'A', 'last_name': 'B',
        'is_active': 'false',
    }, headers=headers)
    assert resp.status_code == 400
