# ==============================================================================
# SERVICIO DE ACTIVIDAD
# ==============================================================================
# Centraliza el registro de eventos del negocio con mensajes humanizados
# (venta registrada, pago recibido, orden actualizada, ...).
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.repositories.audit_repository import AuditRepository


class AuditService:
    """
    Servicio para registro y consulta de actividad.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización de eventos (VENTA, PAGO, PRODUCTO, DEUDA, SERVICIO, SISTEMA)
    - Consulta filtrada de registros

    La regla de oro: si entra dinero → siempre log de PAGO o VENTA
    """

    # Tipos de eventos de actividad
    TYPE_VENTA = 'VENTA'
    TYPE_PAGO = 'PAGO'
    TYPE_PRODUCTO = 'PRODUCTO'
    TYPE_DEUDA = 'DEUDA'
    TYPE_SERVICIO = 'SERVICIO'
    TYPE_SISTEMA = 'SISTEMA'

    def __init__(self, audit_repo: AuditRepository, currency: str = 'JOD'):
        """
        Inicializa el servicio de actividad.

        Args:
            audit_repo: Repositorio de actividad
            currency: Símbolo de moneda para los mensajes
        """
        self.audit_repo = audit_repo
        self.currency = currency

    def _money(self, amount: float) -> str:
        return f"{amount:.2f} {self.currency}"

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Registra un evento genérico."""
        self.audit_repo.log(log_type, message, related_id, details)

    def log_sale_created(
        self,
        sale_id: str,
        total: float,
        payment_method: str,
        customer_name: str,
        items_count: int
    ) -> None:
        """
        Registra una venta confirmada.

        Args:
            sale_id: ID de la venta
            total: Total cobrado
            payment_method: Método de pago
            customer_name: Cliente
            items_count: Unidades vendidas
        """
        message = (
            f"Venta {sale_id} registrada - Total: {self._money(total)} "
            f"({payment_method}) - {items_count} unidades - Cliente: {customer_name}"
        )
        self.log(
            self.TYPE_VENTA,
            message,
            sale_id,
            {'total': total, 'payment_method': payment_method, 'items_count': items_count}
        )

    def log_receivable_created(
        self,
        receivable_id: str,
        customer_name: str,
        total_amount: float,
        due_date: str
    ) -> None:
        """Registra una nueva deuda."""
        message = (
            f"Deuda {receivable_id} registrada a {customer_name} por "
            f"{self._money(total_amount)} - Vence: {due_date[:10]}"
        )
        self.log(
            self.TYPE_DEUDA,
            message,
            receivable_id,
            {'total_amount': total_amount, 'due_date': due_date}
        )

    def log_payment(
        self,
        receivable_id: str,
        amount: float,
        balance_after: float,
        status: str
    ) -> None:
        """
        Registra un abono a una deuda.
        REGLA DE ORO: si entra dinero, siempre se debe llamar esta función.
        """
        message = f"Pago recibido en {receivable_id}: {self._money(amount)}"
        if balance_after <= 0:
            message += " - PAGADO COMPLETO"
        else:
            message += f" - Pendiente: {self._money(balance_after)}"

        self.log(
            self.TYPE_PAGO,
            message,
            receivable_id,
            {'amount': amount, 'balance_after': balance_after, 'status': status}
        )

    def log_product_created(self, pid: str, barcode: str, name: str) -> None:
        """Registra la creación de un producto."""
        message = f"Producto creado: {name} ({barcode})"
        self.log(self.TYPE_PRODUCTO, message, pid, {'barcode': barcode})

    def log_product_updated(self, pid: str, name: str, changes: Dict[str, Any]) -> None:
        """Registra la edición de un producto."""
        fields = ', '.join(sorted(changes.keys())) or 'sin cambios'
        message = f"Producto actualizado: {name} - Campos: {fields}"
        self.log(self.TYPE_PRODUCTO, message, pid, {'changes': changes})

    def log_product_deleted(self, pid: str, barcode: str, name: str) -> None:
        """Registra la eliminación de un producto."""
        message = f"Producto eliminado: {name} ({barcode})"
        self.log(self.TYPE_PRODUCTO, message, pid, {'barcode': barcode})

    def log_job_created(self, job_id: str, customer_name: str, product_name: str) -> None:
        """Registra una nueva orden de servicio."""
        message = f"Orden {job_id} recibida: {product_name} de {customer_name}"
        self.log(self.TYPE_SERVICIO, message, job_id)

    def log_job_status_change(self, job_id: str, old_status: str, new_status: str) -> None:
        """Registra un cambio de estado de una orden."""
        message = f"Orden {job_id}: {old_status} → {new_status}"
        self.log(self.TYPE_SERVICIO, message, job_id, {'from': old_status, 'to': new_status})

    def log_reset(self) -> None:
        """Registra el reinicio de datos de la tienda."""
        self.log(self.TYPE_SISTEMA, "Datos de la tienda restablecidos a los valores por defecto")

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_logs(
        self,
        log_type: Optional[str] = None,
        related_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Obtiene registros filtrados.

        Args:
            log_type: Filtrar por tipo (opcional)
            related_id: Filtrar por ID relacionado (opcional)
            limit: Máximo de registros (opcional)

        Returns:
            Lista de registros, más recientes primero
        """
        logs = self.audit_repo.filter_logs(log_type, related_id)
        if limit is not None:
            logs = logs[:limit]
        return logs
