# ==============================================================================
# SERVICIO DE MANTENIMIENTO
# ==============================================================================
# Órdenes de servicio técnico y sus transiciones de estado.
#
# REGLA DE FECHA DE FINALIZACIÓN:
#   Al pasar por primera vez a Completed o Awaiting Collection se sella la
#   fecha de hoy. Una vez sellada no se cambia nunca (volver a un estado
#   anterior es una corrección de captura, no un nuevo evento).
# ==============================================================================

import math
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Union

from app_pos.models.entities import JobStatus, MaintenanceJob
from app_pos.repositories.maintenance_repository import MaintenanceRepository
from app_pos.services.audit_service import AuditService


# Campos que se pueden editar con update_job
EDITABLE_FIELDS = frozenset([
    'customerName', 'productName', 'issueDescription', 'notes', 'status', 'cost',
])


class MaintenanceService:
    """Servicio para órdenes de servicio técnico."""

    def __init__(
        self,
        maintenance_repo: MaintenanceRepository,
        audit_service: AuditService = None
    ):
        self.maintenance_repo = maintenance_repo
        self.audit_service = audit_service

    def get_all_jobs(self) -> List[Dict[str, Any]]:
        """Snapshot de todas las órdenes (más recientes primero)."""
        return self.maintenance_repo.load_jobs()

    def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        return self.maintenance_repo.get_job(job_id)

    # =========================================================================
    # ALTA Y EDICIÓN
    # =========================================================================

    def add_job(
        self,
        customer_name: str,
        product_name: str,
        issue_description: str,
        notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Registra una orden nueva en estado Received, costo 0, recibida hoy.

        Returns:
            Dict con resultado (ok, error, job)
        """
        required = {
            'customerName': customer_name,
            'productName': product_name,
            'issueDescription': issue_description,
        }
        missing = [k for k, v in required.items() if not isinstance(v, str) or not v.strip()]
        if missing:
            return {'ok': False, 'error': f"Campos obligatorios: {', '.join(missing)}"}
        if notes is not None and not isinstance(notes, str):
            return {'ok': False, 'error': "'notes' debe ser texto"}

        job = MaintenanceJob(
            id=f"M-{uuid.uuid4().hex[:10]}",
            customer_name=customer_name.strip(),
            product_name=product_name.strip(),
            issue_description=issue_description.strip(),
            status=JobStatus.RECEIVED,
            date_received=date.today().isoformat(),
            cost=0.0,
            notes=notes if notes else None,
        )
        data = job.to_dict()
        self.maintenance_repo.create_job(data)

        if self.audit_service:
            self.audit_service.log_job_created(job.id, job.customer_name, job.product_name)

        return {'ok': True, 'job': data}

    def update_job(self, job_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """
        Aplica un parche a la orden y sella la fecha de finalización
        la primera vez que pasa a un estado terminado.

        Args:
            job_id: ID de la orden
            patch: Campos a cambiar (id, dateReceived y completionDate se ignoran)

        Returns:
            Dict con resultado (ok, error, not_found, job)
        """
        current = self.maintenance_repo.get_job(job_id)
        if not current:
            return {'ok': False, 'error': 'Orden no encontrada', 'not_found': True}

        job = MaintenanceJob.from_dict(current)
        old_status = job.status

        changes = {k: v for k, v in (patch or {}).items() if k in EDITABLE_FIELDS}

        if 'status' in changes:
            try:
                job.status = JobStatus(changes['status'])
            except ValueError:
                return {'ok': False, 'error': f"Estado inválido: {changes['status']}"}
        if 'cost' in changes:
            try:
                cost = round(float(changes['cost'] or 0), 2)
            except (TypeError, ValueError):
                return {'ok': False, 'error': 'Costo inválido'}
            if not math.isfinite(cost):
                return {'ok': False, 'error': 'Costo inválido'}
            if cost < 0:
                return {'ok': False, 'error': 'El costo no puede ser negativo'}
            job.cost = cost
        for key, attr in (('customerName', 'customer_name'),
                          ('productName', 'product_name'),
                          ('issueDescription', 'issue_description')):
            if key in changes:
                value = changes[key]
                if not isinstance(value, str) or not value.strip():
                    return {'ok': False, 'error': f"'{key}' no puede quedar vacío"}
                setattr(job, attr, value.strip())
        if 'notes' in changes:
            if changes['notes'] is not None and not isinstance(changes['notes'], str):
                return {'ok': False, 'error': "'notes' debe ser texto"}
            job.notes = changes['notes'] or None

        if 'status' in changes and job.status.is_finished and not job.completion_date:
            job.completion_date = date.today().isoformat()

        data = job.to_dict()
        self.maintenance_repo.update_job(job_id, data)

        if self.audit_service and job.status != old_status:
            self.audit_service.log_job_status_change(job_id, old_status.value, job.status.value)

        return {'ok': True, 'job': data}

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def jobs_by_date(self, received: Union[str, date, None] = None) -> List[Dict[str, Any]]:
        """Órdenes recibidas en la fecha indicada (None = todas)."""
        jobs = self.maintenance_repo.load_jobs()
        if not received:
            return jobs
        day = received.isoformat() if isinstance(received, date) else str(received)[:10]
        return [j for j in jobs if j.get('dateReceived') == day]

    def open_jobs(self, received: Union[str, date, None] = None) -> List[Dict[str, Any]]:
        """Órdenes pendientes (Received / In Progress)."""
        return [
            j for j in self.jobs_by_date(received)
            if not MaintenanceJob.from_dict(j).status.is_finished
        ]

    def finished_jobs(self, received: Union[str, date, None] = None) -> List[Dict[str, Any]]:
        """Órdenes terminadas (Completed / Awaiting Collection)."""
        return [
            j for j in self.jobs_by_date(received)
            if MaintenanceJob.from_dict(j).status.is_finished
        ]
