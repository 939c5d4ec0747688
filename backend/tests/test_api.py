"""
HTTP tests for the order desk API using the Flask test client.

Every error body is ``{"message": ...}``; these tests pin status codes and
messages for the browser console.
"""

import pytest
from decimal import Decimal

from orderdesk.models import Identity, Role


def _login(client, email, password):
    return client.post('/api/login', json={'email': email, 'password': password})


class TestLogin:
    """Test cases for POST /api/login."""

    def test_login_success(self, client, seed):
        response = _login(client, 'alice@example.com', 'alice123')

        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Login successful'
        assert body['token']
        assert body['user'] == {
            'id': seed.alice,
            'name': 'Alice',
            'email': 'alice@example.com',
            'role': 'USER',
            'vip': True,
        }

    def test_login_token_opens_protected_routes(self, client):
        token = _login(client, 'bob@example.com', 'bob123').get_json()['token']

        response = client.get('/api/user/profile', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.get_json()['user']['email'] == 'bob@example.com'

    def test_login_wrong_password(self, client):
        response = _login(client, 'alice@example.com', 'wrong')

        assert response.status_code == 401
        assert response.get_json() == {'message': 'Invalid email or password'}

    def test_login_unknown_email(self, client):
        response = _login(client, 'nobody@example.com', 'alice123')

        assert response.status_code == 401
        assert response.get_json() == {'message': 'Invalid email or password'}

    @pytest.mark.parametrize('payload', [{}, {'email': 'alice@example.com'}, {'password': 'x'}])
    def test_login_missing_fields(self, client, payload):
        response = client.post('/api/login', json=payload)

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Email and password are required'}

    def test_login_without_json_body(self, client):
        response = client.post('/api/login', data='not json')

        assert response.status_code == 400

    @pytest.mark.parametrize('body', [
        {'email': 'admin@example.com', 'password': 12345},
        {'email': ['admin@example.com'], 'password': 'admin123'},
        {'email': 'admin@example.com', 'password': None},
        ['admin@example.com', 'admin123'],
        'admin@example.com',
    ])
    def test_login_malformed_body(self, client, body):
        response = client.post('/api/login', json=body)

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Email and password are required'}


class TestAuthentication:
    """Test cases for the bearer token guard on protected routes."""

    @pytest.mark.parametrize('method,path', [
        ('get', '/api/orders'),
        ('get', '/api/orders/1'),
        ('post', '/api/orders'),
        ('delete', '/api/orders/1'),
        ('get', '/api/stats/sales'),
        ('get', '/api/user/profile'),
    ])
    def test_missing_token(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.get_json() == {'message': 'No authorization token provided'}

    def test_invalid_token(self, client):
        response = client.get('/api/orders', headers={'Authorization': 'Bearer forged.token.value'})

        assert response.status_code == 403
        assert response.get_json() == {'message': 'Invalid or expired token'}

    def test_catalog_is_public(self, client):
        assert client.get('/api/products').status_code == 200
        assert client.get('/api/categories').status_code == 200


class TestOrders:
    """Test cases for the order routes."""

    def _create(self, client, headers, products):
        return client.post('/api/orders', json={'products': products}, headers=headers)

    def test_create_list_and_get(self, client, seed, alice_identity, auth_header):
        headers = auth_header(alice_identity)

        created = self._create(client, headers, [
            {'product_id': seed.coffee, 'quantity': 2},
            {'product_id': seed.chips, 'quantity': 3},
        ])

        assert created.status_code == 201
        body = created.get_json()
        assert body['message'] == 'Order created successfully'
        order_id = body['order_id']

        listing = client.get('/api/orders', headers=headers).get_json()
        assert [o['booking_id'] for o in listing['orders']] == [order_id]
        assert Decimal(listing['orders'][0]['total_amount']) == Decimal('12.25')
        assert listing['pagination'] == {'total': 1, 'page': 1, 'limit': 10, 'totalPages': 1}

        detail = client.get(f'/api/orders/{order_id}', headers=headers).get_json()
        assert [line['product_name'] for line in detail['details']] == ['Coffee', 'Chips']
        assert [line['priority'] for line in detail['details']] == [1, 2]
        assert Decimal(detail['details'][0]['subtotal']) == Decimal('7.00')
        assert detail['total_items'] == 5

    @pytest.mark.parametrize('body', [
        {'products': []},
        {'products': 'coffee'},
        {'products': [{'product_id': 1, 'quantity': 0}]},
        {'products': [{'product_id': 1, 'quantity': True}]},
        {'products': [{'product_id': 1, 'quantity': '2'}]},
        {'products': [{'product_id': 1, 'quantity': 2.0}]},
        {'products': [{'product_id': True, 'quantity': 1}]},
        {},
        [],
    ])
    def test_create_rejects_invalid_product_list(self, client, count_rows, alice_identity, auth_header, body):
        response = client.post('/api/orders', json=body, headers=auth_header(alice_identity))

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Please provide a valid product list'}
        assert count_rows() == (0, 0)

    def test_create_with_unknown_product_is_atomic(self, client, seed, count_rows, alice_identity, auth_header):
        response = self._create(client, auth_header(alice_identity), [
            {'product_id': seed.coffee, 'quantity': 1},
            {'product_id': 99999, 'quantity': 1},
        ])

        assert response.status_code == 500
        assert response.get_json() == {'message': 'Server error'}
        assert count_rows() == (0, 0)

    def test_other_members_order_looks_missing(self, client, seed, alice_identity, bob_identity, auth_header):
        order_id = self._create(client, auth_header(alice_identity), [
            {'product_id': seed.coffee, 'quantity': 1},
        ]).get_json()['order_id']

        response = client.get(f'/api/orders/{order_id}', headers=auth_header(bob_identity))

        assert response.status_code == 404
        assert response.get_json() == {'message': 'Order not found or access denied'}

    def test_list_pagination_query(self, client, add_booking, seed, dates, admin_identity, auth_header):
        for day in range(1, 4):
            add_booking(seed.bob, dates.early.replace(day=day), [(seed.tea, 1)])

        response = client.get('/api/orders?page=2&limit=2', headers=auth_header(admin_identity))

        body = response.get_json()
        assert [o['booking_date'] for o in body['orders']] == ['2024-01-01']
        assert body['pagination']['totalPages'] == 2

    def test_list_with_garbage_pagination_uses_defaults(self, client, admin_identity, auth_header):
        response = client.get('/api/orders?page=abc&limit=-1', headers=auth_header(admin_identity))

        assert response.status_code == 200
        assert response.get_json()['pagination']['limit'] == 10

    def test_list_with_huge_pagination_is_clamped(self, client, add_booking, seed, dates, admin_identity, auth_header):
        add_booking(seed.alice, dates.early, [(seed.coffee, 1)])

        response = client.get('/api/orders?page=' + '9' * 25 + '&limit=99999', headers=auth_header(admin_identity))

        assert response.status_code == 200
        body = response.get_json()
        assert body['orders'] == []
        assert body['pagination'] == {'total': 1, 'page': 1000000, 'limit': 1000, 'totalPages': 1}

    def test_owner_cannot_delete(self, client, seed, count_rows, alice_identity, auth_header):
        order_id = self._create(client, auth_header(alice_identity), [
            {'product_id': seed.coffee, 'quantity': 1},
        ]).get_json()['order_id']

        response = client.delete(f'/api/orders/{order_id}', headers=auth_header(alice_identity))

        assert response.status_code == 403
        assert response.get_json() == {'message': 'Not allowed to delete orders'}
        assert count_rows() == (1, 1)

    def test_admin_deletes(self, client, seed, count_rows, alice_identity, admin_identity, auth_header):
        order_id = self._create(client, auth_header(alice_identity), [
            {'product_id': seed.coffee, 'quantity': 1},
            {'product_id': seed.tea, 'quantity': 1},
        ]).get_json()['order_id']

        response = client.delete(f'/api/orders/{order_id}', headers=auth_header(admin_identity))

        assert response.status_code == 200
        assert response.get_json() == {'message': 'Order deleted successfully'}
        assert count_rows() == (0, 0)

    def test_delete_missing(self, client, admin_identity, auth_header):
        response = client.delete('/api/orders/31337', headers=auth_header(admin_identity))

        assert response.status_code == 404
        assert response.get_json() == {'message': 'Order not found'}


class TestCatalogRoutes:

    def test_products_query_parameters(self, client, seed):
        response = client.get(f'/api/products?category={seed.drinks}&search=tea&limit=5')

        body = response.get_json()
        assert [p['product_name'] for p in body['products']] == ['Green Tea']
        assert body['pagination'] == {'total': 1, 'page': 1, 'limit': 5, 'totalPages': 1}

    def test_products_default_limit(self, client):
        assert client.get('/api/products').get_json()['pagination']['limit'] == 20

    def test_products_huge_pagination_is_clamped(self, client):
        response = client.get('/api/products?page=' + '1' * 30 + '&limit=' + '5' * 30)

        assert response.status_code == 200
        body = response.get_json()
        assert body['products'] == []
        assert body['pagination']['page'] == 1000000
        assert body['pagination']['limit'] == 1000

    def test_categories(self, client):
        body = client.get('/api/categories').get_json()

        assert [c['category_name'] for c in body['categories']] == ['Drinks', 'Snacks']


class TestStatsAndProfile:

    def test_stats_forbidden_for_members(self, client, alice_identity, auth_header):
        response = client.get('/api/stats/sales', headers=auth_header(alice_identity))

        assert response.status_code == 403
        assert response.get_json() == {'message': 'Access to this resource is not allowed'}

    def test_stats_for_admin(self, client, add_booking, seed, dates, admin_identity, auth_header):
        add_booking(seed.alice, dates.early, [(seed.coffee, 2)])

        response = client.get('/api/stats/sales', headers=auth_header(admin_identity))

        body = response.get_json()
        assert response.status_code == 200
        assert body['orderStats']['total_orders'] == 1
        assert Decimal(body['orderStats']['total_sales']) == Decimal('7.00')
        assert body['topProducts'][0]['product_name'] == 'Coffee'
        assert body['memberStats'][0]['member_email'] == 'alice@example.com'
        assert body['categorySales'][0]['category_name'] == 'Drinks'

    def test_profile_of_deleted_member(self, client, auth_header):
        ghost = Identity(id=9999, email='ghost@example.com', name='Ghost', role=Role.USER)

        response = client.get('/api/user/profile', headers=auth_header(ghost))

        assert response.status_code == 404
        assert response.get_json() == {'message': 'User not found'}


class TestMisc:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'ok'
        assert body['database']['database_type'] == 'sqlite'

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nope')

        assert response.status_code == 404
        assert 'message' in response.get_json()

    def test_method_not_allowed_is_json(self, client):
        response = client.put('/api/orders')

        assert response.status_code == 405
        assert 'message' in response.get_json()

    def test_cors_headers_on_api(self, client):
        response = client.get('/api/products', headers={'Origin': 'http://console.test'})

        assert response.headers.get('Access-Control-Allow-Origin') in ('*', 'http://console.test')


class TestCli:
    """Test cases for the Flask CLI commands."""

    def test_create_member_command(self, app, db_config):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            'create-member', 'carol@example.com', 'Carol', '--password', 'pw123', '--role', 'ADMIN',
        ])

        assert result.exit_code == 0
        assert 'carol@example.com' in result.output

    def test_create_member_duplicate(self, app):
        result = app.test_cli_runner().invoke(args=[
            'create-member', 'alice@example.com', 'Alice', '--password', 'pw',
        ])

        assert result.exit_code != 0
        assert 'already registered' in result.output

    def test_seed_db_skips_existing_members(self, app, client):
        result = app.test_cli_runner().invoke(args=['seed-db'])

        assert result.exit_code == 0
        assert 'Database seeded successfully!' in result.output
        assert _login(client, 'member@example.com', 'member123').status_code == 200


class TestAppFactory:
    """Test cases for create_app wiring."""

    def test_builds_database_from_config(self):
        from orderdesk.api import create_app, get_services
        from orderdesk.utils.config import AppConfig

        config = AppConfig(
            database_url='sqlite:///:memory:',
            jwt_secret='factory-secret',
            db_pool_size=3,
            db_pool_timeout=7,
            db_pool_recycle=90,
            log_level='WARNING',
        )

        app = create_app(config)
        with app.app_context():
            db = get_services().db

        assert db._is_initialized is True
        assert db.pool_size == 3
        assert db.pool_timeout == 7
        assert db.pool_recycle == 90
        assert app.test_client().get('/api/categories').get_json() == {'categories': []}
        db.close()
