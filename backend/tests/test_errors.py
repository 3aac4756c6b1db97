from seed_utils import auth_headers


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_method_not_allowed_shape(client):
    resp = client.get('/auth/logout')
    assert resp.status_code == 405
    assert resp.get_json()['error']['status'] == 405


def test_invalid_token_shape(client):
    resp = client.get('/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
    assert resp.status_code == 401
    body = resp.get_json()
    assert body['error']['title'] == 'Unauthorized'


def test_internal_error_shape(client, monkeypatch):
    headers = auth_headers(client, 'admin', 'admin')
    # Monkeypatch AFTER login so auth works; only break the users listing
    import partsdesk.routes.users as users_mod

    class BoomSession:
        def query(self, *a, **k):
            raise RuntimeError('explode')

        def execute(self, *a, **k):
            raise RuntimeError('explode')

    monkeypatch.setattr(users_mod, 'get_db', lambda: BoomSession())
    resp = client.get('/users', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'
    assert body['error']['detail'] == 'Unexpected error'
