from datetime import date, timedelta

from app_pos.app_container import AppContainer
from app_pos.services import WALK_IN_CUSTOMER

from conftest import make_product


def test_sale_deducts_stock_and_prepends(container):
    product = make_product(container)
    before = len(container.sales_service.get_all_sales())

    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 3, 'price': 10}], 30, 'cash'
    )

    assert result['ok'], result.get('error')
    sale = result['sale']
    assert sale['id'].startswith('SALE-')
    assert sale['total'] == 30.0
    assert sale['subtotal'] == 30.0
    assert sale['tax'] == 0.0
    assert sale['paymentMethod'] == 'cash'
    assert sale['customerName'] == WALK_IN_CUSTOMER
    assert sale['items'][0]['quantity'] == 3

    sales = container.sales_service.get_all_sales()
    assert len(sales) == before + 1
    assert sales[0]['id'] == sale['id']
    assert container.catalog_service.get_product(product['id'])['stock'] == 2


def test_sale_insufficient_stock_rejected_without_changes(container):
    product = make_product(container)
    before = len(container.sales_service.get_all_sales())

    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 6, 'price': 10}], 60, 'cash'
    )

    assert not result['ok']
    assert 'Stock insuficiente' in result['error']
    assert len(container.sales_service.get_all_sales()) == before
    assert container.catalog_service.get_product(product['id'])['stock'] == 5


def test_sale_stock_checked_across_duplicate_lines(container):
    product = make_product(container)
    lines = [
        {'id': product['id'], 'quantity': 3, 'price': 10},
        {'id': product['id'], 'quantity': 3, 'price': 10},
    ]
    result = container.sales_service.add_sale(lines, 60, 'cash')
    assert not result['ok']
    assert container.catalog_service.get_product(product['id'])['stock'] == 5


def test_sale_price_below_minimum_rejected(container):
    product = make_product(container)
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 7}], 7, 'cash'
    )
    assert not result['ok']
    assert 'mínimo' in result['error']


def test_sale_total_must_match_lines(container):
    product = make_product(container)
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 2, 'price': 10}], 15, 'cash'
    )
    assert not result['ok']
    assert container.catalog_service.get_product(product['id'])['stock'] == 5


def test_sale_invalid_payment_method(container):
    product = make_product(container)
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'bitcoin'
    )
    assert not result['ok']


def test_sale_visa_recorded_as_card(container):
    product = make_product(container)
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'visa', 'Marta'
    )
    assert result['ok']
    assert result['sale']['paymentMethod'] == 'card'
    assert result['sale']['customerName'] == 'Marta'


def test_sale_empty_cart_rejected(container):
    assert not container.sales_service.add_sale([], 0, 'cash')['ok']


def test_sale_lines_are_snapshots(container):
    product = make_product(container)
    sale = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 9}], 9, 'cash'
    )['sale']

    container.catalog_service.update_product(product['id'], {'name': 'Renombrado', 'cost': 1})

    stored = container.sales_service.get_sale(sale['id'])
    assert stored['items'][0]['name'] == 'Producto de prueba'
    assert stored['items'][0]['cost'] == 6.0
    assert stored['items'][0]['price'] == 9.0


def test_receivable_sale_does_not_create_debt(container):
    product = make_product(container)
    before = len(container.receivables_service.get_all_receivables())
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'receivable', 'Pedro'
    )
    assert result['ok']
    assert len(container.receivables_service.get_all_receivables()) == before


def test_checkout_on_credit_creates_receivable(container):
    product = make_product(container)
    due = (date.today() + timedelta(days=30)).isoformat()

    result = container.sales_service.checkout(
        [{'id': product['id'], 'quantity': 2, 'price': 10}], 'receivable', 'Pedro', due
    )

    assert result['ok'], result.get('error')
    debt = result['receivable']
    assert debt['id'].startswith('R-')
    assert debt['customerName'] == 'Pedro'
    assert debt['totalAmount'] == 20.0
    assert debt['amountPaid'] == 0.0
    assert debt['status'] == 'Unpaid'
    assert container.receivables_service.get_all_receivables()[0]['id'] == debt['id']


def test_checkout_on_credit_requires_due_date(container):
    product = make_product(container)
    sales_before = len(container.sales_service.get_all_sales())

    result = container.sales_service.checkout(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 'receivable', 'Pedro'
    )

    assert not result['ok']
    assert len(container.sales_service.get_all_sales()) == sales_before
    assert container.catalog_service.get_product(product['id'])['stock'] == 5


def test_sale_survives_restart(container, data_dir):
    product = make_product(container)
    sale = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 3, 'price': 10}], 30, 'cash'
    )['sale']

    reopened = AppContainer(base_path=data_dir)
    assert reopened.sales_service.get_all_sales()[0]['id'] == sale['id']
    assert reopened.catalog_service.get_product(product['id'])['stock'] == 2


def test_sale_is_logged_in_activity(container):
    product = make_product(container)
    sale = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'cash'
    )['sale']
    logs = container.audit_service.get_logs('VENTA', sale['id'])
    assert len(logs) == 1


def test_sale_non_finite_values_rejected(container):
    product = make_product(container)
    sales_before = len(container.sales_service.get_all_sales())
    nan = float('nan')
    inf = float('inf')

    attempts = [
        ([{'id': product['id'], 'quantity': 1, 'price': nan}], nan),
        ([{'id': product['id'], 'quantity': 1, 'price': 10}], nan),
        ([{'id': product['id'], 'quantity': nan, 'price': 10}], 10),
        ([{'id': product['id'], 'quantity': inf, 'price': 10}], 10),
        ([{'id': product['id'], 'quantity': 1, 'price': inf}], inf),
    ]
    for lines, total in attempts:
        result = container.sales_service.add_sale(lines, total, 'cash')
        assert not result['ok']

    result = container.sales_service.checkout(
        [{'id': product['id'], 'quantity': 1, 'price': nan}], 'cash'
    )
    assert not result['ok']

    assert len(container.sales_service.get_all_sales()) == sales_before
    assert container.catalog_service.get_product(product['id'])['stock'] == 5


def test_sale_customer_name_must_be_text(container):
    product = make_product(container)
    result = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'cash', 42
    )
    assert not result['ok']
    assert container.catalog_service.get_product(product['id'])['stock'] == 5
