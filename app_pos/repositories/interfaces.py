# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que cumplen los repositorios. Los servicios dependen de estas
# interfaces, no de las implementaciones JSON:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Cambiar JSON por otra base sólo requiere una nueva implementación
#
# 2. TESTING
#    - Fácil crear dobles en memoria que cumplan estas interfaces
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


# ==============================================================================
# INTERFAZ BASE
# ==============================================================================

@runtime_checkable
class ICollectionRepository(Protocol):
    """
    Colección persistente con copia en memoria.
    Usado por: Productos, Ventas, Cuentas por cobrar, Mantenimiento.
    """

    key: str

    def all(self) -> List[Dict[str, Any]]:
        """Snapshot de todos los registros."""
        ...

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene un registro por ID."""
        ...

    def prepend(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al inicio."""
        ...

    def replace(self, record_id: str, record: Dict[str, Any]) -> bool:
        """Reemplaza un registro."""
        ...

    def remove(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Elimina un registro."""
        ...

    def reload(self) -> List[Dict[str, Any]]:
        """Recarga datos desde el almacenamiento."""
        ...

    def reset(self) -> None:
        """Borra el almacenamiento y restaura los datos por defecto."""
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS POR DOMINIO
# ==============================================================================

@runtime_checkable
class IProductRepository(ICollectionRepository, Protocol):
    """Interfaz para el catálogo de productos."""

    def get_product(self, pid: str) -> Optional[Dict[str, Any]]:
        ...

    def barcode_taken(self, barcode: str, exclude_id: Optional[str] = None) -> bool:
        ...

    def replace_many(self, records: List[Dict[str, Any]]) -> None:
        ...


@runtime_checkable
class ISalesRepository(ICollectionRepository, Protocol):
    """Interfaz para el historial de ventas."""

    def create_sale(self, sale_data: Dict[str, Any]) -> str:
        ...


@runtime_checkable
class IReceivableRepository(ICollectionRepository, Protocol):
    """Interfaz para el libro de cuentas por cobrar."""

    def create_receivable(self, data: Dict[str, Any]) -> str:
        ...

    def update_receivable(self, receivable_id: str, data: Dict[str, Any]) -> bool:
        ...


@runtime_checkable
class IMaintenanceRepository(ICollectionRepository, Protocol):
    """Interfaz para las órdenes de mantenimiento."""

    def create_job(self, data: Dict[str, Any]) -> str:
        ...

    def update_job(self, job_id: str, data: Dict[str, Any]) -> bool:
        ...


@runtime_checkable
class IAuditRepository(Protocol):
    """Interfaz para el registro de actividad."""

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        ...

    def load(self) -> List[Dict[str, Any]]:
        ...
