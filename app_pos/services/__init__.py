# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio del punto de venta.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones antes de escribir
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los servicios retornan dicts {'ok': bool, 'error': msg, ...}
#
# ESTRUCTURA:
# ├── catalog_service.py     → Productos, códigos de barras, búsqueda
# ├── cart_service.py        → Carrito de compras (reglas de stock y precio)
# ├── sales_service.py       → Ventas, descuento de stock, checkout
# ├── receivables_service.py → Deudas y abonos
# ├── maintenance_service.py → Órdenes de servicio técnico
# ├── audit_service.py       → Registro de actividad
# └── stats_service.py       → Stock bajo, reportes, valorización
# ==============================================================================

from app_pos.services.audit_service import AuditService
from app_pos.services.catalog_service import CatalogService
from app_pos.services.cart_service import CartService
from app_pos.services.receivables_service import ReceivablesService, is_overdue, parse_datetime
from app_pos.services.sales_service import SalesService, WALK_IN_CUSTOMER
from app_pos.services.maintenance_service import MaintenanceService
from app_pos.services.stats_service import StatsService

__all__ = [
    'AuditService',
    'CatalogService',
    'CartService',
    'ReceivablesService',
    'is_overdue',
    'parse_datetime',
    'SalesService',
    'WALK_IN_CUSTOMER',
    'MaintenanceService',
    'StatsService',
]
