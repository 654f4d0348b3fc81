import os
from datetime import date, timedelta

from app_pos import performance_logger


def test_list_products(client):
    r = client.get('/api/products')
    assert r.status_code == 200
    data = r.get_json()
    assert data['success']
    assert len(data['products']) == 6

    r = client.get('/api/products?q=laptop')
    assert [p['id'] for p in r.get_json()['products']] == ['prod-2']


def test_create_update_delete_product(client):
    r = client.post('/api/products', json={
        'name': 'Funda', 'barcode': '555000000010', 'cost': 2, 'price': 5,
        'minimumPrice': 4, 'stock': 10, 'lowStockThreshold': 2, 'category': 'Accessories',
    })
    assert r.status_code == 201
    pid = r.get_json()['product']['id']

    r = client.post('/api/products', json={'name': 'Otra', 'barcode': '555000000010', 'price': 1})
    assert r.status_code == 400
    assert not r.get_json()['success']

    r = client.patch(f'/api/products/{pid}', json={'price': 3})
    assert r.status_code == 400

    r = client.patch(f'/api/products/{pid}', json={'price': 6})
    assert r.status_code == 200
    assert r.get_json()['product']['price'] == 6.0

    r = client.delete(f'/api/products/{pid}')
    assert r.status_code == 200
    assert client.delete(f'/api/products/{pid}').status_code == 404
    assert client.patch('/api/products/prod-x', json={'name': 'X'}).status_code == 404


def test_barcode_categories_and_low_stock(client):
    barcode = client.get('/api/products/barcode').get_json()['barcode']
    assert len(barcode) == 12 and barcode.isdigit()

    categories = client.get('/api/categories').get_json()['categories']
    assert categories[0] == 'Cameras'
    assert 'Repair Parts' in categories

    low = client.get('/api/products/low-stock').get_json()['products']
    assert [p['id'] for p in low] == ['prod-4', 'prod-6']

    summary = client.get('/api/inventory/summary').get_json()
    assert summary['low_stock_count'] == 2
    assert summary['total_sale_value'] > summary['total_cost_value']


def test_cart_and_cash_checkout(client):
    assert client.post('/api/cart/add', json={'product_id': 'prod-1'}).status_code == 200
    r = client.post('/api/cart/add', json={'product_id': 'prod-1'})
    assert r.get_json()['cart']['total_items'] == 2

    r = client.post('/api/cart/price', json={'product_id': 'prod-1', 'price': 50, 'finalize': True})
    data = r.get_json()
    assert data['price_reset']
    assert data['cart']['items'][0]['price'] == 70.0

    r = client.post('/api/cart/quantity', json={'product_id': 'prod-1', 'quantity': 9})
    assert r.status_code == 400
    assert r.get_json()['available'] == 8

    r = client.post('/api/checkout', json={'payment_method': 'cash'})
    assert r.status_code == 201
    sale = r.get_json()['sale']
    assert sale['total'] == 140.0

    assert client.get('/api/cart').get_json()['items'] == []
    products = client.get('/api/products').get_json()['products']
    assert next(p for p in products if p['id'] == 'prod-1')['stock'] == 6
    assert client.get('/api/sales').get_json()['sales'][0]['id'] == sale['id']
    assert client.get('/api/sales/today').get_json()['total'] == 140.0


def test_cart_errors(client):
    assert client.post('/api/cart/add', json={'product_id': 'prod-6'}).status_code == 400
    assert client.post('/api/cart/add', json={'product_id': 'prod-x'}).status_code == 404
    assert client.post('/api/cart/add', json={}).status_code == 400
    assert client.post('/api/checkout', json={'payment_method': 'cash'}).status_code == 400


def test_cart_clear_and_remove(client):
    client.post('/api/cart/add', json={'product_id': 'prod-3'})
    client.post('/api/cart/add', json={'product_id': 'prod-5'})
    r = client.post('/api/cart/quantity', json={'product_id': 'prod-3', 'quantity': 0})
    assert r.get_json()['removed']
    assert r.get_json()['cart']['items_count'] == 1

    client.post('/api/cart/clear')
    assert client.get('/api/cart').get_json()['total'] == 0


def test_credit_checkout_and_payments(client):
    due = (date.today() + timedelta(days=7)).isoformat()
    client.post('/api/cart/add', json={'product_id': 'prod-5'})

    r = client.post('/api/checkout', json={'payment_method': 'receivable'})
    assert r.status_code == 400

    r = client.post('/api/checkout', json={
        'payment_method': 'receivable', 'customer_name': 'Julia', 'due_date': due,
    })
    assert r.status_code == 201
    debt = r.get_json()['receivable']
    assert debt['totalAmount'] == 35.0

    url = f"/api/receivables/{debt['id']}/payments"
    assert client.post(url, json={'amount': 50}).status_code == 400
    r = client.post(url, json={'amount': 35})
    assert r.status_code == 200
    assert r.get_json()['status'] == 'Paid'
    assert client.post('/api/receivables/R-x/payments', json={'amount': 1}).status_code == 404

    paid = client.get('/api/receivables?tab=paid').get_json()['receivables']
    assert [p['id'] for p in paid] == [debt['id']]
    unpaid = client.get('/api/receivables?tab=unpaid&search=ana').get_json()['receivables']
    assert unpaid[0]['id'] == 'R-1'
    assert unpaid[0]['overdue']
    assert client.get('/api/receivables?tab=otro').status_code == 400

    summary = client.get('/api/receivables/summary').get_json()
    assert summary['total_receivables'] == 224.0
    assert summary['total_due'] == 139.0
    assert summary['overdue_count'] == 1


def test_create_receivable_directly(client):
    r = client.post('/api/receivables', json={
        'customer_name': 'Mario', 'total_amount': 20, 'due_date': '2030-01-01',
    })
    assert r.status_code == 201
    assert r.get_json()['receivable']['status'] == 'Unpaid'
    assert client.post('/api/receivables', json={'customer_name': 'Mario'}).status_code == 400


def test_maintenance_flow(client):
    r = client.post('/api/maintenance', json={
        'customer_name': 'Sofía', 'product_name': 'Tablet', 'issue_description': 'Batería',
    })
    assert r.status_code == 201
    job = r.get_json()['job']

    r = client.patch(f"/api/maintenance/{job['id']}", json={'status': 'Completed', 'cost': 15})
    assert r.get_json()['job']['completionDate'] == date.today().isoformat()

    today = date.today().isoformat()
    finished = client.get(f'/api/maintenance?date={today}&state=finished').get_json()['jobs']
    assert [j['id'] for j in finished] == [job['id']]
    assert client.get('/api/maintenance?state=open').get_json()['jobs'][0]['id'] == 'M-1'
    assert client.get('/api/maintenance?date=ayer').status_code == 400
    assert client.patch('/api/maintenance/M-x', json={'status': 'Completed'}).status_code == 404


def test_sales_report_endpoint(client):
    r = client.get('/api/reports/sales?start=2024-06-01&end=2024-06-30')
    data = r.get_json()
    assert data['number_of_sales'] == 1
    assert data['total_revenue'] == 35.0
    assert data['total_profit'] == 17.0
    assert client.get('/api/reports/sales?start=junio').status_code == 400


def test_reset_endpoint(client):
    client.delete('/api/products/prod-1')
    client.post('/api/cart/add', json={'product_id': 'prod-2'})

    r = client.post('/api/admin/reset')
    assert r.status_code == 200
    assert len(client.get('/api/products').get_json()['products']) == 6
    assert client.get('/api/cart').get_json()['items'] == []

    logs = client.get('/api/activity?type=SISTEMA').get_json()['logs']
    assert len(logs) == 1


def test_unknown_route_returns_json(client):
    r = client.get('/api/nada')
    assert r.status_code == 404
    assert r.get_json()['success'] is False


def test_nan_in_json_body_rejected(client):
    r = client.post(
        '/api/receivables/R-1/payments',
        data='{"amount": NaN}',
        content_type='application/json',
    )
    assert r.status_code == 400
    assert r.get_json()['success'] is False

    r = client.post(
        '/api/products',
        data='{"name": "Raro", "barcode": "555000000088", "price": NaN, "minimumPrice": 8}',
        content_type='application/json',
    )
    assert r.status_code == 400

    receivables = client.get('/api/receivables?search=ana').get_json()['receivables']
    assert receivables[0]['amountPaid'] == 50.0


def test_maintenance_non_text_name_is_validation_error(client):
    r = client.post('/api/maintenance', json={
        'customer_name': 7, 'product_name': 'Tablet', 'issue_description': 'Batería',
    })
    assert r.status_code == 400


def test_performance_report(client, app):
    performance_logger.configure(enabled=True)
    client.post('/api/cart/add', json={'product_id': 'prod-1'})
    assert client.post('/api/checkout', json={'payment_method': 'cash'}).status_code == 201

    r = client.get('/api/admin/performance')
    assert r.status_code == 200
    functions = r.get_json()['functions']
    assert functions['Registrar venta']['calls'] == 1
    assert os.path.exists(os.path.join(app.config['LOGS_DIR'], 'slow_functions.log'))
