# ==============================================================================
# REPOSITORIO DE MANTENIMIENTO
# ==============================================================================
# Encapsula todo el acceso a app_maintenance_jobs.json
# Las órdenes se almacenan como lista, más reciente primero. Nunca se borran.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.models.defaults import DEFAULT_MAINTENANCE_JOBS, default_collection
from app_pos.repositories.base import CollectionRepository


class MaintenanceRepository(CollectionRepository):
    """Repositorio para las órdenes de servicio técnico."""

    key = 'app_maintenance_jobs'

    def __init__(self, base_path: str):
        super().__init__(base_path, lambda: default_collection(DEFAULT_MAINTENANCE_JOBS))

    def load_jobs(self) -> List[Dict[str, Any]]:
        """Snapshot de todas las órdenes."""
        return self.all()

    def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene una orden por su ID."""
        return self.get(job_id)

    def create_job(self, data: Dict[str, Any]) -> str:
        """Registra una nueva orden al inicio de la lista."""
        self.prepend(data)
        return data.get('id', '')

    def update_job(self, job_id: str, data: Dict[str, Any]) -> bool:
        """Reemplaza una orden existente."""
        return self.replace(job_id, data)
