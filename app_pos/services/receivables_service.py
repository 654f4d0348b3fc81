# ==============================================================================
# SERVICIO DE CUENTAS POR COBRAR
# ==============================================================================
# Centraliza toda la lógica de negocio de deudas y abonos.
#
# REGLAS:
# - Un abono debe ser > 0 y <= saldo pendiente (se rechaza, nunca se recorta)
# - El estado se recalcula siempre desde (amountPaid, totalAmount)
# - "Vencida" se calcula al leer: vencimiento pasado y estado distinto de Paid
# ==============================================================================

import math
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional, Union

from app_pos.models.entities import Receivable, ReceivableStatus
from app_pos.performance_logger import profile_function
from app_pos.repositories.receivable_repository import ReceivableRepository
from app_pos.services.audit_service import AuditService


DateInput = Union[str, date, datetime, None]


def parse_datetime(value: DateInput) -> Optional[datetime]:
    """
    Convierte una fecha (ISO, YYYY-MM-DD, date o datetime) en datetime con zona UTC.
    Retorna None si no puede parsear.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_overdue(receivable: Dict[str, Any], today: Optional[date] = None) -> bool:
    """
    Indica si una deuda está vencida (no se guarda, se calcula al leer).

    Args:
        receivable: Datos de la deuda
        today: Fecha de referencia (por defecto hoy)
    """
    entity = Receivable.from_dict(receivable)
    if entity.status == ReceivableStatus.PAID:
        return False
    due = parse_datetime(entity.due_date)
    if due is None:
        return False
    return due.date() < (today or date.today())


class ReceivablesService:
    """
    Servicio para el libro de cuentas por cobrar.

    Responsabilidades:
    - Registrar deudas de ventas a crédito
    - Validar y aplicar abonos
    - Filtrar y resumir el libro
    """

    def __init__(
        self,
        receivable_repo: ReceivableRepository,
        audit_service: AuditService = None
    ):
        """
        Inicializa el servicio.

        Args:
            receivable_repo: Repositorio de deudas
            audit_service: Servicio de actividad
        """
        self.receivable_repo = receivable_repo
        self.audit_service = audit_service

    def get_all_receivables(self) -> List[Dict[str, Any]]:
        """Snapshot del libro (más recientes primero)."""
        return self.receivable_repo.load_receivables()

    def get_receivable(self, receivable_id: str) -> Optional[Dict[str, Any]]:
        return self.receivable_repo.get_receivable(receivable_id)

    # =========================================================================
    # ALTA DE DEUDAS
    # =========================================================================

    def validate_receivable(self, customer_name: str, total_amount: Any, due_date: DateInput) -> Optional[str]:
        """
        Valida los datos de una nueva deuda.

        Returns:
            Mensaje de error o None si es válida
        """
        if not isinstance(customer_name, str) or not customer_name.strip():
            return 'El nombre del deudor es obligatorio'
        try:
            amount = float(total_amount)
        except (TypeError, ValueError):
            return 'Monto inválido'
        if not math.isfinite(amount):
            return 'Monto inválido'
        if amount <= 0:
            return 'El monto de la deuda debe ser mayor a 0'
        if parse_datetime(due_date) is None:
            return 'La fecha de vencimiento es obligatoria'
        return None

    @profile_function(name="Registrar deuda")
    def add_receivable(self, customer_name: str, total_amount: float, due_date: DateInput) -> Dict[str, Any]:
        """
        Registra una deuda nueva: pagado 0, estado Unpaid.

        Args:
            customer_name: Deudor
            total_amount: Monto adeudado
            due_date: Fecha de vencimiento

        Returns:
            Dict con resultado (ok, error, receivable)
        """
        error = self.validate_receivable(customer_name, total_amount, due_date)
        if error:
            return {'ok': False, 'error': error}

        receivable = Receivable(
            id=f"R-{uuid.uuid4().hex[:10]}",
            customer_name=customer_name.strip(),
            total_amount=round(float(total_amount), 2),
            amount_paid=0.0,
            issue_date=datetime.now(timezone.utc).isoformat(),
            due_date=parse_datetime(due_date).isoformat(),
        )
        data = receivable.to_dict()
        self.receivable_repo.create_receivable(data)

        if self.audit_service:
            self.audit_service.log_receivable_created(
                receivable.id, receivable.customer_name, receivable.total_amount, receivable.due_date
            )

        return {'ok': True, 'receivable': data}

    # =========================================================================
    # ABONOS
    # =========================================================================

    def validate_payment(self, receivable_id: str, amount: Any) -> Dict[str, Any]:
        """
        Valida si un abono es posible sin aplicarlo.

        Returns:
            Dict con ok, error, balance, remaining_after
        """
        try:
            amount = round(float(amount), 2)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Monto inválido'}
        if not math.isfinite(amount):
            return {'ok': False, 'error': 'Monto inválido'}

        if amount <= 0:
            return {'ok': False, 'error': 'El monto debe ser mayor a 0'}

        data = self.receivable_repo.get_receivable(receivable_id)
        if not data:
            return {'ok': False, 'error': 'Deuda no encontrada', 'not_found': True}

        receivable = Receivable.from_dict(data)
        balance = receivable.balance
        if amount > balance:
            return {
                'ok': False,
                'error': f'El pago excede el saldo pendiente ({balance:.2f})',
                'balance': balance
            }

        return {
            'ok': True,
            'receivable_id': receivable_id,
            'amount': amount,
            'balance': balance,
            'remaining_after': round(balance - amount, 2)
        }

    @profile_function(name="Registrar abono")
    def add_payment(self, receivable_id: str, amount: float) -> Dict[str, Any]:
        """
        Aplica un abono a una deuda.
        REGLA DE ORO: si entra dinero, siempre se registra en actividad.

        Args:
            receivable_id: ID de la deuda
            amount: Monto del abono (0 < amount <= saldo)

        Returns:
            Dict con resultado (ok, error, receivable, status_changed, ...)
        """
        check = self.validate_payment(receivable_id, amount)
        if not check['ok']:
            return check

        receivable = Receivable.from_dict(self.receivable_repo.get_receivable(receivable_id))
        old_status = receivable.status
        receivable.amount_paid = round(receivable.amount_paid + check['amount'], 2)
        new_status = receivable.status

        data = receivable.to_dict()
        self.receivable_repo.update_receivable(receivable_id, data)

        if self.audit_service:
            self.audit_service.log_payment(receivable_id, check['amount'], receivable.balance, new_status.value)

        return {
            'ok': True,
            'receivable': data,
            'amount': check['amount'],
            'balance': receivable.balance,
            'status': new_status.value,
            'status_changed': old_status != new_status,
            'old_status': old_status.value,
            'new_status': new_status.value
        }

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def filter_receivables(self, tab: str = 'all', search: str = '') -> List[Dict[str, Any]]:
        """
        Filtra el libro por pestaña y por nombre del deudor.

        Args:
            tab: 'all', 'paid' o 'unpaid' (Unpaid + Partially Paid)
            search: Texto a buscar en el nombre (sin distinguir mayúsculas)
        """
        search = (search or '').strip().lower()
        result = []
        for data in self.receivable_repo.load_receivables():
            status = Receivable.from_dict(data).status
            if tab == 'paid' and status != ReceivableStatus.PAID:
                continue
            if tab == 'unpaid' and status == ReceivableStatus.PAID:
                continue
            if search and search not in data.get('customerName', '').lower():
                continue
            result.append(data)
        return result

    def overdue_receivables(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Deudas vencidas a la fecha indicada."""
        return [r for r in self.receivable_repo.load_receivables() if is_overdue(r, today)]

    def receivables_summary(self) -> Dict[str, float]:
        """
        Totales del libro.

        Returns:
            Dict con total_receivables, total_paid, total_due
        """
        receivables = [Receivable.from_dict(r) for r in self.receivable_repo.load_receivables()]
        total = round(sum(r.total_amount for r in receivables), 2)
        paid = round(sum(r.amount_paid for r in receivables), 2)
        return {
            'total_receivables': total,
            'total_paid': paid,
            'total_due': round(total - paid, 2)
        }
