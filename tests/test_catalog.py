import re
from datetime import date

from app_pos.models import DEFAULT_IMAGE

from conftest import make_product


def test_defaults_loaded_when_no_file(container):
    products = container.catalog_service.get_all_products()
    assert [p['id'] for p in products][:2] == ['prod-1', 'prod-2']
    assert len(products) == 6
    assert container.product_repo.loaded_from_defaults


def test_add_product_prepends_with_new_id(container):
    product = make_product(container)
    assert product['id'].startswith('prod-')
    assert product['purchaseDate'] == date.today().isoformat()
    assert product['image'] == DEFAULT_IMAGE
    assert container.catalog_service.get_all_products()[0]['id'] == product['id']


def test_add_product_duplicate_barcode_rejected(container):
    before = len(container.product_repo)
    result = container.catalog_service.add_product({
        'name': 'Copia', 'barcode': '100000000001', 'price': 5, 'minimumPrice': 1,
    })
    assert not result['ok']
    assert '100000000001' in result['error']
    assert len(container.product_repo) == before


def test_add_product_price_below_minimum_rejected(container):
    result = container.catalog_service.add_product({
        'name': 'Barato', 'barcode': '555000000099', 'price': 5, 'minimumPrice': 6,
    })
    assert not result['ok']


def test_add_product_negative_stock_rejected(container):
    result = container.catalog_service.add_product({
        'name': 'Negativo', 'barcode': '555000000098', 'price': 5, 'minimumPrice': 1, 'stock': -1,
    })
    assert not result['ok']


def test_update_product_keeps_invariants(container):
    catalog = container.catalog_service

    result = catalog.update_product('prod-1', {'price': 10})
    assert not result['ok']
    assert catalog.get_product('prod-1')['price'] == 79.0

    result = catalog.update_product('prod-1', {'barcode': '100000000002'})
    assert not result['ok']

    # su propio código no cuenta como duplicado
    result = catalog.update_product('prod-1', {'barcode': '100000000001', 'stock': 20})
    assert result['ok']
    assert catalog.get_product('prod-1')['stock'] == 20


def test_update_product_ignores_id(container):
    result = container.catalog_service.update_product('prod-2', {'id': 'otro', 'name': 'Laptop 15'})
    assert result['ok']
    assert result['product']['id'] == 'prod-2'
    assert container.catalog_service.get_product('prod-2')['name'] == 'Laptop 15'


def test_update_unknown_product_not_found(container):
    result = container.catalog_service.update_product('prod-x', {'name': 'Nada'})
    assert not result['ok']
    assert result['not_found']


def test_delete_product_keeps_sale_history(container):
    product = make_product(container)
    sale = container.sales_service.add_sale(
        [{'id': product['id'], 'quantity': 1, 'price': 10}], 10, 'cash'
    )
    assert sale['ok']

    result = container.catalog_service.delete_product(product['id'])
    assert result['ok']
    assert container.catalog_service.get_product(product['id']) is None
    stored = container.sales_service.get_sale(sale['sale']['id'])
    assert stored['items'][0]['name'] == product['name']

    assert container.catalog_service.delete_product(product['id'])['not_found']


def test_generate_barcode_is_free_twelve_digits(container):
    barcode = container.catalog_service.generate_barcode()
    assert re.fullmatch(r'\d{12}', barcode)
    assert not container.product_repo.barcode_taken(barcode)


def test_search_products(container):
    catalog = container.catalog_service
    assert [p['id'] for p in catalog.search_products('laptop')] == ['prod-2']
    assert [p['id'] for p in catalog.search_products('0000000003')] == ['prod-3']
    assert [p['id'] for p in catalog.search_products('', 'Audio')] == ['prod-5']
    assert len(catalog.search_products('', 'all')) == 6
    assert catalog.search_products('laptop', 'Audio') == []


def test_non_finite_numbers_rejected(container):
    catalog = container.catalog_service
    before = len(container.product_repo)

    for field in ('price', 'cost', 'minimumPrice', 'stock', 'lowStockThreshold'):
        for bad in (float('nan'), float('inf')):
            data = {'name': 'Raro', 'barcode': '555000000077', 'price': 10, 'minimumPrice': 8}
            data[field] = bad
            result = catalog.add_product(data)
            assert not result['ok'], (field, bad)

    assert len(container.product_repo) == before

    assert not catalog.update_product('prod-1', {'price': float('nan')})['ok']
    assert not catalog.update_product('prod-1', {'stock': float('inf')})['ok']
    assert catalog.get_product('prod-1')['price'] == 79.0
    assert catalog.get_product('prod-1')['stock'] == 8
