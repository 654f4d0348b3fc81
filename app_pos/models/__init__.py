# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Reglas derivadas (estado de deuda, stock bajo) en un solo lugar
#   - Fácil serialización/deserialización para JSON
# ==============================================================================

from .entities import (
    # Catálogo
    Product,
    DEFAULT_IMAGE,

    # Ventas
    CartLine,
    Sale,
    PaymentMethod,

    # Cuentas por cobrar
    Receivable,
    ReceivableStatus,
    receivable_status,

    # Mantenimiento
    MaintenanceJob,
    JobStatus,
)

__all__ = [
    # Catálogo
    'Product',
    'DEFAULT_IMAGE',

    # Ventas
    'CartLine',
    'Sale',
    'PaymentMethod',

    # Cuentas por cobrar
    'Receivable',
    'ReceivableStatus',
    'receivable_status',

    # Mantenimiento
    'MaintenanceJob',
    'JobStatus',
]
