# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a app_sales.json
# Las ventas se almacenan como lista, más reciente primero.
# Sólo se agregan: una venta registrada no se modifica ni se borra.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.models.defaults import DEFAULT_SALES, default_collection
from app_pos.repositories.base import CollectionRepository


class SalesRepository(CollectionRepository):
    """
    Repositorio para el historial de ventas.

    Formato de datos en app_sales.json:
    [
        {
            "id": "SALE-...",
            "customerName": "Cliente de mostrador",
            "items": [{...producto..., "quantity": 2, "price": 9.0}],
            "subtotal": 18.0,
            "tax": 0,
            "total": 18.0,
            "date": "2024-06-15T10:24:00+00:00",
            "paymentMethod": "cash"
        }
    ]
    """

    key = 'app_sales'

    def __init__(self, base_path: str):
        super().__init__(base_path, lambda: default_collection(DEFAULT_SALES))

    def load_sales(self) -> List[Dict[str, Any]]:
        """Snapshot de todas las ventas (más recientes primero)."""
        return self.all()

    def get_sale(self, sale_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene una venta por su ID."""
        return self.get(sale_id)

    def create_sale(self, sale_data: Dict[str, Any]) -> str:
        """
        Registra una nueva venta al inicio del historial.

        Args:
            sale_data: Datos de la venta (debe incluir 'id')

        Returns:
            ID de la venta
        """
        self.prepend(sale_data)
        return sale_data.get('id', '')
