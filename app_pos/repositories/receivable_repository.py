# ==============================================================================
# REPOSITORIO DE CUENTAS POR COBRAR
# ==============================================================================
# Encapsula todo el acceso a app_receivables.json
# Las deudas se almacenan como lista, más reciente primero. Nunca se borran.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.models.defaults import DEFAULT_RECEIVABLES, default_collection
from app_pos.repositories.base import CollectionRepository


class ReceivableRepository(CollectionRepository):
    """
    Repositorio para el libro de cuentas por cobrar.

    Formato de datos en app_receivables.json:
    [
        {
            "id": "R-...",
            "customerName": "Ana Torres",
            "totalAmount": 100.0,
            "amountPaid": 40.0,
            "issueDate": "...",
            "dueDate": "...",
            "status": "Partially Paid"
        }
    ]
    """

    key = 'app_receivables'

    def __init__(self, base_path: str):
        super().__init__(base_path, lambda: default_collection(DEFAULT_RECEIVABLES))

    def load_receivables(self) -> List[Dict[str, Any]]:
        """Snapshot de todas las deudas."""
        return self.all()

    def get_receivable(self, receivable_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene una deuda por su ID."""
        return self.get(receivable_id)

    def create_receivable(self, data: Dict[str, Any]) -> str:
        """Registra una nueva deuda al inicio del libro."""
        self.prepend(data)
        return data.get('id', '')

    def update_receivable(self, receivable_id: str, data: Dict[str, Any]) -> bool:
        """Reemplaza una deuda existente."""
        return self.replace(receivable_id, data)
