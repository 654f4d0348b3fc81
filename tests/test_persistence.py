import json
import os

from app_pos.app_container import AppContainer
from app_pos.models.defaults import DEFAULT_PRODUCTS
from app_pos.repositories import ProductRepository, SalesRepository

from conftest import make_product


def _read(data_dir, key):
    with open(os.path.join(data_dir, f'{key}.json'), 'r', encoding='utf-8') as f:
        return json.load(f)


def test_missing_file_uses_defaults_without_writing(data_dir):
    repo = ProductRepository(data_dir)
    assert repo.loaded_from_defaults
    assert [p['id'] for p in repo.all()] == [p['id'] for p in DEFAULT_PRODUCTS]
    assert not repo.exists()


def test_defaults_are_copies(data_dir):
    repo = ProductRepository(data_dir)
    products = repo.all()
    products[0]['name'] = 'Cambiado'
    assert repo.get('prod-1')['name'] == DEFAULT_PRODUCTS[0]['name']
    assert DEFAULT_PRODUCTS[0]['name'] != 'Cambiado'


def test_every_change_is_written_through(container, data_dir):
    product = make_product(container)
    stored = _read(data_dir, 'app_products')
    assert stored[0]['id'] == product['id']

    container.catalog_service.update_product(product['id'], {'stock': 9})
    assert _read(data_dir, 'app_products')[0]['stock'] == 9


def test_corrupt_file_falls_back_to_defaults(data_dir, capsys):
    os.makedirs(data_dir, exist_ok=True)
    with open(os.path.join(data_dir, 'app_sales.json'), 'w', encoding='utf-8') as f:
        f.write('{esto no es json')

    repo = SalesRepository(data_dir)

    assert repo.loaded_from_defaults
    assert [s['id'] for s in repo.all()] == ['SALE-1']
    assert '[ADVERTENCIA]' in capsys.readouterr().out


def test_wrong_shape_falls_back_to_defaults(data_dir):
    os.makedirs(data_dir, exist_ok=True)
    with open(os.path.join(data_dir, 'app_products.json'), 'w', encoding='utf-8') as f:
        json.dump({'prod-1': {}}, f)

    repo = ProductRepository(data_dir)
    assert repo.loaded_from_defaults
    assert len(repo) == len(DEFAULT_PRODUCTS)


def test_saved_file_wins_over_defaults(container, data_dir):
    container.catalog_service.delete_product('prod-1')
    reopened = ProductRepository(data_dir)
    assert not reopened.loaded_from_defaults
    assert reopened.get('prod-1') is None


def test_reset_all_restores_defaults_and_removes_files(container, data_dir):
    make_product(container)
    container.receivables_service.add_receivable('Carla', 10, '2030-01-01')
    container.maintenance_service.add_job('Sofía', 'Laptop', 'No enciende')
    container.sales_service.add_sale(
        [{'id': 'prod-1', 'quantity': 1, 'price': 79}], 79, 'cash'
    )

    container.reset_all()

    for key in ('app_products', 'app_sales', 'app_receivables', 'app_maintenance_jobs'):
        assert not os.path.exists(os.path.join(data_dir, f'{key}.json'))
    assert len(container.catalog_service.get_all_products()) == 6
    assert container.catalog_service.get_product('prod-1')['stock'] == 8
    assert [s['id'] for s in container.sales_service.get_all_sales()] == ['SALE-1']
    assert [r['id'] for r in container.receivables_service.get_all_receivables()] == ['R-1']
    assert [j['id'] for j in container.maintenance_service.get_all_jobs()] == ['M-1']

    # una instancia nueva tampoco ve los datos anteriores
    fresh = AppContainer(base_path=data_dir)
    assert len(fresh.catalog_service.get_all_products()) == 6

    # la actividad se conserva y registra el reinicio
    logs = container.audit_service.get_logs('SISTEMA')
    assert len(logs) == 1
    assert container.audit_service.get_logs('VENTA')


def test_write_failure_is_reported_not_raised(tmp_path, capsys):
    blocker = tmp_path / 'bloqueado'
    blocker.write_text('soy un archivo, no un directorio')

    repo = ProductRepository(str(blocker))
    repo.prepend({'id': 'prod-x', 'name': 'X'})

    assert repo.get('prod-x')['name'] == 'X'
    assert '[PERSISTENCIA ERROR]' in capsys.readouterr().out
