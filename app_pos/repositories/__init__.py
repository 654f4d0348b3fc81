# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
# Cada colección usa una clave de almacenamiento independiente.
#
# ESTRUCTURA:
# ├── interfaces.py               → Protocolos/Interfaces (contratos)
# ├── base.py                     → BaseRepository, ListRepository, CollectionRepository
# ├── product_repository.py       → app_products.json
# ├── sales_repository.py         → app_sales.json
# ├── receivable_repository.py    → app_receivables.json
# ├── maintenance_repository.py   → app_maintenance_jobs.json
# └── audit_repository.py         → audit.json (registro de actividad)
# ==============================================================================

# Interfaces
from .interfaces import (
    ICollectionRepository,
    IProductRepository,
    ISalesRepository,
    IReceivableRepository,
    IMaintenanceRepository,
    IAuditRepository,
)

# Clases base
from .base import BaseRepository, ListRepository, CollectionRepository, StorageError

# Implementaciones JSON
from .product_repository import ProductRepository
from .sales_repository import SalesRepository
from .receivable_repository import ReceivableRepository
from .maintenance_repository import MaintenanceRepository
from .audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'ICollectionRepository',
    'IProductRepository',
    'ISalesRepository',
    'IReceivableRepository',
    'IMaintenanceRepository',
    'IAuditRepository',

    # Clases base
    'BaseRepository',
    'ListRepository',
    'CollectionRepository',
    'StorageError',

    # Implementaciones JSON
    'ProductRepository',
    'SalesRepository',
    'ReceivableRepository',
    'MaintenanceRepository',
    'AuditRepository',
]
