# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (cada test arma su propio contenedor sobre un directorio temporal)
#   - Cambiar el almacenamiento sin tocar los servicios
#
# Cada instancia es independiente: create_app() arma uno y lo guarda en
# app.extensions['app_pos']. No existe un contenedor global.
# ==============================================================================

import os
from typing import Optional

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (archivos JSON)
# ═══════════════════════════════════════════════════════════════════════════════
from app_pos.repositories import (
    ProductRepository,
    SalesRepository,
    ReceivableRepository,
    MaintenanceRepository,
    AuditRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from app_pos.services import (
    AuditService,
    CatalogService,
    CartService,
    ReceivablesService,
    SalesService,
    MaintenanceService,
    StatsService,
    WALK_IN_CUSTOMER,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Los repositorios y servicios se crean la primera vez que se piden y se
    reutilizan mientras viva el contenedor.

    Uso:
        container = AppContainer(base_path='/path/to/data')
        sales_service = container.sales_service
        container.reset_all()
    """

    def __init__(
        self,
        base_path: str = None,
        walk_in_name: str = WALK_IN_CUSTOMER,
        currency: str = 'JOD'
    ):
        """
        Inicializa el contenedor.

        Args:
            base_path: Directorio de datos (donde están los JSON)
            walk_in_name: Nombre usado para ventas sin cliente
            currency: Moneda usada en los mensajes de actividad
        """
        self._base_path = base_path or os.path.join(os.getcwd(), 'data')
        self.walk_in_name = walk_in_name
        self.currency = currency

        # Repositorios (lazy loading)
        self._product_repo: Optional[ProductRepository] = None
        self._sales_repo: Optional[SalesRepository] = None
        self._receivable_repo: Optional[ReceivableRepository] = None
        self._maintenance_repo: Optional[MaintenanceRepository] = None
        self._audit_repo: Optional[AuditRepository] = None

        # Servicios (lazy loading)
        self._audit_service: Optional[AuditService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._cart_service: Optional[CartService] = None
        self._receivables_service: Optional[ReceivablesService] = None
        self._sales_service: Optional[SalesService] = None
        self._maintenance_service: Optional[MaintenanceService] = None
        self._stats_service: Optional[StatsService] = None

    @property
    def base_path(self) -> str:
        return self._base_path

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> ProductRepository:
        """Repositorio de productos."""
        if self._product_repo is None:
            self._product_repo = ProductRepository(self._base_path)
        return self._product_repo

    @property
    def sales_repo(self) -> SalesRepository:
        """Repositorio de ventas."""
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(self._base_path)
        return self._sales_repo

    @property
    def receivable_repo(self) -> ReceivableRepository:
        """Repositorio de deudas."""
        if self._receivable_repo is None:
            self._receivable_repo = ReceivableRepository(self._base_path)
        return self._receivable_repo

    @property
    def maintenance_repo(self) -> MaintenanceRepository:
        """Repositorio de órdenes de servicio."""
        if self._maintenance_repo is None:
            self._maintenance_repo = MaintenanceRepository(self._base_path)
        return self._maintenance_repo

    @property
    def audit_repo(self) -> AuditRepository:
        """Repositorio de actividad."""
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self._base_path)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo, currency=self.currency)
        return self._audit_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.product_repo, self.audit_service)
        return self._catalog_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.catalog_service)
        return self._cart_service

    @property
    def receivables_service(self) -> ReceivablesService:
        if self._receivables_service is None:
            self._receivables_service = ReceivablesService(self.receivable_repo, self.audit_service)
        return self._receivables_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.sales_repo,
                self.product_repo,
                self.receivables_service,
                self.audit_service,
                walk_in_name=self.walk_in_name
            )
        return self._sales_service

    @property
    def maintenance_service(self) -> MaintenanceService:
        if self._maintenance_service is None:
            self._maintenance_service = MaintenanceService(self.maintenance_repo, self.audit_service)
        return self._maintenance_service

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(
                self.product_repo,
                self.sales_repo,
                self.receivable_repo
            )
        return self._stats_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset_all(self) -> None:
        """
        Restablece las cuatro colecciones a sus valores por defecto
        y borra sus archivos. El registro de actividad se conserva.
        """
        for repo in (self.product_repo, self.sales_repo,
                     self.receivable_repo, self.maintenance_repo):
            repo.reset()
        print("[RESET] Productos, ventas, deudas y órdenes restablecidos a los valores por defecto")
        self.audit_service.log_reset()
