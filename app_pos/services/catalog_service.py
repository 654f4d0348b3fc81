# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con productos.
# Invariantes que se validan en cada alta y edición:
#   - price >= minimumPrice
#   - barcode único en todo el catálogo (comparación exacta)
# ==============================================================================

import math
import random
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from app_pos.models.entities import DEFAULT_IMAGE, Product
from app_pos.performance_logger import profile_function
from app_pos.repositories.product_repository import ProductRepository
from app_pos.services.audit_service import AuditService


# Campos que se pueden editar con update_product
EDITABLE_FIELDS = frozenset([
    'name', 'barcode', 'cost', 'price', 'minimumPrice', 'stock',
    'lowStockThreshold', 'category', 'supplier', 'image', 'purchaseDate',
])

_MONEY_FIELDS = ('cost', 'price', 'minimumPrice')
_COUNT_FIELDS = ('stock', 'lowStockThreshold')


class CatalogService:
    """
    Servicio para gestión del catálogo.

    Responsabilidades:
    - CRUD de productos
    - Unicidad de código de barras y piso de precio
    - Generación de códigos de barras
    - Búsqueda por nombre/código y categoría
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        audit_service: AuditService = None
    ):
        """
        Inicializa el servicio de catálogo.

        Args:
            product_repo: Repositorio de productos
            audit_service: Servicio de actividad (opcional)
        """
        self.product_repo = product_repo
        self.audit_service = audit_service

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_all_products(self) -> List[Dict[str, Any]]:
        """Snapshot de todos los productos."""
        return self.product_repo.get_all_products()

    def get_product(self, pid: str) -> Optional[Dict[str, Any]]:
        """Obtiene un producto por su ID."""
        return self.product_repo.get_product(pid)

    def search_products(self, term: str = '', category: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Busca productos por nombre (sin distinguir mayúsculas) o por
        fragmento de código de barras, opcionalmente dentro de una categoría.

        Args:
            term: Texto a buscar (vacío = todos)
            category: Categoría exacta (None o 'all' = todas)

        Returns:
            Lista de productos que coinciden
        """
        term = (term or '').strip()
        term_lower = term.lower()
        results = []
        for product in self.product_repo.all():
            if category and category != 'all' and product.get('category') != category:
                continue
            if term and term_lower not in product.get('name', '').lower() \
                    and term not in product.get('barcode', ''):
                continue
            results.append(product)
        return results

    # =========================================================================
    # VALIDACIÓN
    # =========================================================================

    def _normalize(self, data: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[str]]:
        """
        Normaliza los campos numéricos y de texto de un alta/edición.

        Returns:
            Tupla (datos normalizados, error o None)
        """
        clean = {}
        for key, value in data.items():
            if key not in EDITABLE_FIELDS:
                continue
            if key in _MONEY_FIELDS:
                try:
                    value = round(float(value if value not in (None, '') else 0), 2)
                except (TypeError, ValueError):
                    return {}, f"Valor inválido para '{key}'"
                if not math.isfinite(value):
                    return {}, f"Valor inválido para '{key}'"
                if value < 0:
                    return {}, f"'{key}' no puede ser negativo"
            elif key in _COUNT_FIELDS:
                try:
                    number = float(value if value not in (None, '') else 0)
                except (TypeError, ValueError):
                    return {}, f"Valor inválido para '{key}'"
                if not math.isfinite(number):
                    return {}, f"Valor inválido para '{key}'"
                if number != int(number):
                    return {}, f"'{key}' debe ser un número entero"
                value = int(number)
                if value < 0:
                    return {}, f"'{key}' no puede ser negativo"
            elif key in ('name', 'barcode'):
                value = str(value if value is not None else '').strip()
            else:
                value = '' if value is None else str(value)
            clean[key] = value
        return clean, None

    def validate_product(self, product: Dict[str, Any], exclude_id: Optional[str] = None) -> Optional[str]:
        """
        Valida las invariantes de un producto completo.

        Args:
            product: Datos del producto (ya normalizados)
            exclude_id: ID del producto en edición (se ignora en la unicidad)

        Returns:
            Mensaje de error o None si es válido
        """
        if not product.get('name'):
            return 'El nombre del producto es obligatorio'
        barcode = product.get('barcode')
        if not barcode:
            return 'El código de barras es obligatorio'
        if self.product_repo.barcode_taken(barcode, exclude_id):
            return f"El código de barras '{barcode}' ya está en uso por otro producto"
        if product.get('price', 0) < product.get('minimumPrice', 0):
            return 'El precio de venta no puede ser menor al precio mínimo'
        return None

    # =========================================================================
    # OPERACIONES DE PRODUCTOS
    # =========================================================================

    @profile_function(name="Crear producto")
    def add_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un nuevo producto con ID nuevo y la fecha de hoy como fecha de compra.

        Args:
            data: Datos del formulario (name, barcode, cost, price, minimumPrice,
                  stock, lowStockThreshold, category, supplier, image)

        Returns:
            Dict con resultado (ok, error, product)
        """
        clean, error = self._normalize(data)
        if error:
            return {'ok': False, 'error': error}

        product = Product(
            id=f"prod-{uuid.uuid4().hex[:10]}",
            name=clean.get('name', ''),
            barcode=clean.get('barcode', ''),
            cost=clean.get('cost', 0.0),
            price=clean.get('price', 0.0),
            minimum_price=clean.get('minimumPrice', 0.0),
            stock=clean.get('stock', 0),
            low_stock_threshold=clean.get('lowStockThreshold', 0),
            category=clean.get('category', ''),
            supplier=clean.get('supplier', ''),
            image=clean.get('image') or DEFAULT_IMAGE,
            purchase_date=date.today().isoformat(),
        ).to_dict()

        error = self.validate_product(product)
        if error:
            return {'ok': False, 'error': error}

        self.product_repo.prepend(product)

        if self.audit_service:
            self.audit_service.log_product_created(product['id'], product['barcode'], product['name'])

        return {'ok': True, 'product': product}

    @profile_function(name="Editar producto")
    def update_product(self, pid: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """
        Mezcla los campos del parche con el producto y revalida sus invariantes.

        Args:
            pid: ID del producto
            patch: Campos a actualizar (los desconocidos y 'id' se ignoran)

        Returns:
            Dict con resultado (ok, error, not_found, product)
        """
        current = self.product_repo.get_product(pid)
        if not current:
            return {'ok': False, 'error': 'Producto no encontrado', 'not_found': True}

        clean, error = self._normalize(patch)
        if error:
            return {'ok': False, 'error': error}

        merged = dict(current)
        merged.update(clean)
        if not merged.get('image'):
            merged['image'] = DEFAULT_IMAGE

        error = self.validate_product(merged, exclude_id=pid)
        if error:
            return {'ok': False, 'error': error}

        self.product_repo.replace(pid, merged)

        if self.audit_service:
            self.audit_service.log_product_updated(pid, merged['name'], clean)

        return {'ok': True, 'product': merged}

    def delete_product(self, pid: str) -> Dict[str, Any]:
        """
        Elimina un producto sin tocar las ventas históricas
        (conservan su copia del producto).

        Args:
            pid: ID del producto

        Returns:
            Dict con resultado (ok, not_found, product)
        """
        removed = self.product_repo.remove(pid)
        if removed is None:
            return {'ok': False, 'error': 'Producto no encontrado', 'not_found': True}

        if self.audit_service:
            self.audit_service.log_product_deleted(pid, removed.get('barcode', ''), removed.get('name', ''))

        return {'ok': True, 'product': removed}

    # =========================================================================
    # GENERACIÓN DE CÓDIGO DE BARRAS
    # =========================================================================

    def generate_barcode(self, max_attempts: int = 50) -> str:
        """
        Genera un código de barras numérico de 12 dígitos que no use ningún producto.

        Returns:
            Código de barras libre
        """
        for _ in range(max_attempts):
            candidate = str(random.randint(100000000000, 999999999999))
            if not self.product_repo.barcode_taken(candidate):
                return candidate
        raise RuntimeError('No se pudo generar un código de barras libre')
