import pytest

from app_pos import performance_logger
from app_pos.app_container import AppContainer
from app_pos.main import create_app


@pytest.fixture(autouse=True)
def quiet_profiling(tmp_path):
    # logs de rendimiento dentro del directorio temporal del test
    performance_logger.configure(logs_dir=str(tmp_path / 'logs'), enabled=False)
    performance_logger.reset_stats()
    yield


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / 'data')


@pytest.fixture
def container(data_dir):
    return AppContainer(base_path=data_dir)


@pytest.fixture
def app(tmp_path, data_dir):
    app = create_app({
        'TESTING': True,
        'DATA_DIR': data_dir,
        'LOGS_DIR': str(tmp_path / 'logs'),
        'ENABLE_PROFILING': False,
        'SECRET_KEY': 'test-secret',
    })
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def make_product(container, **overrides):
    """Crea un producto de prueba y retorna sus datos."""
    data = {
        'name': 'Producto de prueba',
        'barcode': '555000000001',
        'cost': 6.0,
        'price': 10.0,
        'minimumPrice': 8.0,
        'stock': 5,
        'lowStockThreshold': 1,
        'category': 'Pruebas',
    }
    data.update(overrides)
    result = container.catalog_service.add_product(data)
    assert result['ok'], result.get('error')
    return result['product']
