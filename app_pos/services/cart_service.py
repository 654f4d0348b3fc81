# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Centraliza las reglas del carrito antes de confirmar la venta.
# El carrito es una lista de líneas (copia del producto + quantity + price);
# la capa web lo guarda en la sesión de Flask.
# Las operaciones nunca modifican la lista recibida: retornan una nueva.
# ==============================================================================

import copy
import math
from typing import Any, Dict, List, Optional

from app_pos.services.catalog_service import CatalogService


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar productos validando stock disponible
    - Cambiar cantidades (<= 0 elimina la línea)
    - Cambiar precios respetando el precio mínimo al confirmar la edición
    - Calcular totales
    """

    def __init__(self, catalog_service: CatalogService):
        """
        Inicializa el servicio de carrito.

        Args:
            catalog_service: Servicio de catálogo (para stock y precios actuales)
        """
        self.catalog_service = catalog_service

    def _find_line(self, cart: List[Dict[str, Any]], product_id: str) -> Optional[int]:
        for i, line in enumerate(cart):
            if str(line.get('id')) == str(product_id):
                return i
        return None

    def cart_totals(self, cart: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, subtotal, total, total_items, items_count
        """
        subtotal = round(sum(
            float(line.get('price', 0)) * int(line.get('quantity', 0))
            for line in cart
        ), 2)
        return {
            'items': cart,
            'subtotal': subtotal,
            'total': subtotal,  # Sin impuestos
            'total_items': sum(int(line.get('quantity', 0)) for line in cart),
            'items_count': len(cart)
        }

    def add_to_cart(self, cart: List[Dict[str, Any]], product_id: str) -> Dict[str, Any]:
        """
        Agrega una unidad del producto al carrito.

        Args:
            cart: Carrito actual
            product_id: ID del producto

        Returns:
            Dict con resultado (ok, error, cart, available)
        """
        product = self.catalog_service.get_product(product_id)
        if not product:
            return {'ok': False, 'error': 'Producto no encontrado', 'not_found': True, 'cart': cart}

        available = int(product.get('stock', 0))
        index = self._find_line(cart, product_id)

        if index is not None:
            line = cart[index]
            if line['quantity'] >= available:
                return {
                    'ok': False,
                    'error': f"Stock insuficiente de '{product['name']}'. Disponible: {available}",
                    'available': available,
                    'cart': cart
                }
            new_cart = copy.deepcopy(cart)
            new_cart[index]['quantity'] += 1
        else:
            if available <= 0:
                return {
                    'ok': False,
                    'error': f"'{product['name']}' está agotado",
                    'available': 0,
                    'cart': cart
                }
            new_line = dict(product)
            new_line['quantity'] = 1
            new_cart = copy.deepcopy(cart) + [new_line]

        return {'ok': True, 'cart': new_cart}

    def update_quantity(self, cart: List[Dict[str, Any]], product_id: str, quantity: int) -> Dict[str, Any]:
        """
        Cambia la cantidad de una línea.
        Una cantidad <= 0 elimina la línea; una cantidad mayor al stock se rechaza
        y deja el carrito sin cambios.

        Returns:
            Dict con resultado (ok, error, cart, removed)
        """
        index = self._find_line(cart, product_id)
        if index is None:
            return {'ok': False, 'error': 'El producto no está en el carrito', 'not_found': True, 'cart': cart}

        try:
            quantity = int(quantity)
        except (TypeError, ValueError, OverflowError):
            return {'ok': False, 'error': 'Cantidad inválida', 'cart': cart}

        new_cart = copy.deepcopy(cart)
        if quantity <= 0:
            new_cart.pop(index)
            return {'ok': True, 'cart': new_cart, 'removed': True}

        product = self.catalog_service.get_product(product_id)
        available = int(product.get('stock', 0)) if product else 0
        if quantity > available:
            return {
                'ok': False,
                'error': f"Stock insuficiente de '{cart[index].get('name')}'. Disponible: {available}",
                'available': available,
                'cart': cart
            }

        new_cart[index]['quantity'] = quantity
        return {'ok': True, 'cart': new_cart}

    def update_price(
        self,
        cart: List[Dict[str, Any]],
        product_id: str,
        price: float,
        finalize: bool = False
    ) -> Dict[str, Any]:
        """
        Cambia el precio unitario de una línea.

        Mientras se escribe (finalize=False) el precio se guarda tal cual.
        Al confirmar la edición (finalize=True) un precio menor al mínimo del
        producto se reemplaza por el mínimo y se avisa con price_reset=True.

        Returns:
            Dict con resultado (ok, error, cart, price_reset, message)
        """
        index = self._find_line(cart, product_id)
        if index is None:
            return {'ok': False, 'error': 'El producto no está en el carrito', 'not_found': True, 'cart': cart}

        try:
            price = round(float(price or 0), 2)
        except (TypeError, ValueError):
            price = 0.0
        if not math.isfinite(price):
            return {'ok': False, 'error': 'Precio inválido', 'cart': cart}

        new_cart = copy.deepcopy(cart)
        line = new_cart[index]
        minimum = float(line.get('minimumPrice', 0))

        if finalize and price < minimum:
            line['price'] = minimum
            return {
                'ok': True,
                'cart': new_cart,
                'price_reset': True,
                'message': f"Precio de '{line.get('name')}' ajustado al mínimo permitido: {minimum:.2f}"
            }

        line['price'] = price
        return {'ok': True, 'cart': new_cart, 'price_reset': False}
