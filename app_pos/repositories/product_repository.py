# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a app_products.json
# Los productos se almacenan como lista: [{producto1}, {producto2}, ...]
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_pos.models.defaults import DEFAULT_PRODUCTS, default_collection
from app_pos.repositories.base import CollectionRepository


class ProductRepository(CollectionRepository):
    """
    Repositorio para el catálogo de productos.

    Formato de datos en app_products.json:
    [
        {
            "id": "prod-1",
            "name": "Cargador USB-C",
            "barcode": "100000000004",
            "price": 9.0,
            "minimumPrice": 7.0,
            "stock": 2,
            ...
        }
    ]
    """

    key = 'app_products'

    def __init__(self, base_path: str):
        super().__init__(base_path, lambda: default_collection(DEFAULT_PRODUCTS))

    def get_product(self, pid: str) -> Optional[Dict[str, Any]]:
        """Obtiene un producto por su ID."""
        return self.get(pid)

    def product_exists(self, pid: str) -> bool:
        """Verifica si un producto existe."""
        return self._index_of(pid) is not None

    def find_by_barcode(self, barcode: str) -> Optional[Dict[str, Any]]:
        """
        Busca un producto por código de barras exacto (distingue mayúsculas).

        Args:
            barcode: Código a buscar

        Returns:
            Producto encontrado o None
        """
        return self.find_by('barcode', barcode)

    def barcode_taken(self, barcode: str, exclude_id: Optional[str] = None) -> bool:
        """True si otro producto (distinto de exclude_id) ya usa el código."""
        for record in self._items:
            if record.get('barcode') == barcode and str(record.get('id')) != str(exclude_id):
                return True
        return False

    def get_all_products(self) -> List[Dict[str, Any]]:
        """Snapshot de todos los productos."""
        return self.all()
