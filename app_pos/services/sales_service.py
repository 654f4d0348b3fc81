# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con ventas.
# Convierte las líneas del carrito en una venta inmutable y descuenta stock.
#
# POLÍTICA DE STOCK: una venta que pida más unidades de las disponibles se
# rechaza completa en esta capa (nunca se recorta a 0). Toda la validación
# ocurre antes de tocar cualquier colección.
# ==============================================================================

import math
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app_pos.models.entities import CartLine, PaymentMethod, Product, Sale
from app_pos.performance_logger import profile_function
from app_pos.repositories.product_repository import ProductRepository
from app_pos.repositories.sales_repository import SalesRepository
from app_pos.services.audit_service import AuditService
from app_pos.services.receivables_service import ReceivablesService


# Nombre usado cuando no se indica cliente
WALK_IN_CUSTOMER = 'Cliente de mostrador'


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Validar el carrito completo contra el stock y los precios mínimos
    - Registrar la venta (más reciente primero)
    - Descontar stock de cada producto vendido
    - Checkout a crédito: venta + deuda en la misma operación lógica
    """

    def __init__(
        self,
        sales_repo: SalesRepository,
        product_repo: ProductRepository,
        receivables_service: ReceivablesService = None,
        audit_service: AuditService = None,
        walk_in_name: str = WALK_IN_CUSTOMER
    ):
        """
        Inicializa el servicio de ventas.

        Args:
            sales_repo: Repositorio de ventas
            product_repo: Repositorio de productos (para descontar stock)
            receivables_service: Libro de deudas (para checkout a crédito)
            audit_service: Servicio de actividad (opcional)
            walk_in_name: Nombre del cliente de mostrador
        """
        self.sales_repo = sales_repo
        self.product_repo = product_repo
        self.receivables_service = receivables_service
        self.audit_service = audit_service
        self.walk_in_name = walk_in_name

    def get_all_sales(self) -> List[Dict[str, Any]]:
        """Snapshot del historial (más recientes primero)."""
        return self.sales_repo.load_sales()

    def get_sale(self, sale_id: str) -> Optional[Dict[str, Any]]:
        return self.sales_repo.get_sale(sale_id)

    # =========================================================================
    # VALIDACIÓN
    # =========================================================================

    def _build_lines(self, cart_lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Valida las líneas y construye las copias que se guardarán en la venta.

        Returns:
            Dict con ok/error y, si es válido, 'lines' (CartLine) y 'products'
            (productos actuales por ID)
        """
        if not cart_lines:
            return {'ok': False, 'error': 'El carrito está vacío'}

        lines = []
        products = {}
        requested = OrderedDict()
        errors = []

        for raw in cart_lines:
            pid = str(raw.get('id', ''))
            current = products.get(pid) or self.product_repo.get_product(pid)
            if not current:
                errors.append(f"Producto {pid} no encontrado")
                continue
            products[pid] = current

            try:
                qty = float(raw.get('quantity', 0))
                price = round(float(raw.get('price', 0)), 2)
            except (TypeError, ValueError):
                errors.append(f"Cantidad o precio inválido para {current.get('name')}")
                continue
            if not (math.isfinite(qty) and math.isfinite(price)):
                errors.append(f"Cantidad o precio inválido para {current.get('name')}")
                continue
            if qty <= 0 or qty != int(qty):
                errors.append(f"Cantidad inválida para {current.get('name')}")
                continue
            qty = int(qty)

            minimum = float(current.get('minimumPrice', 0))
            if price < minimum:
                errors.append(
                    f"Precio de {current.get('name')} ({price:.2f}) menor al mínimo ({minimum:.2f})"
                )
                continue

            requested[pid] = requested.get(pid, 0) + qty
            lines.append(CartLine(product=Product.from_dict(current), quantity=qty, price=price))

        for pid, qty in requested.items():
            available = int(products[pid].get('stock', 0))
            if qty > available:
                errors.append(
                    f"Stock insuficiente para {products[pid].get('name')}. "
                    f"Solicitado: {qty}, Disponible: {available}"
                )

        if errors:
            return {'ok': False, 'error': '; '.join(errors)}

        return {'ok': True, 'lines': lines, 'products': products, 'requested': requested}

    def validate_sale(
        self,
        cart_lines: List[Dict[str, Any]],
        total: float,
        payment_method: Any
    ) -> Dict[str, Any]:
        """
        Valida una venta sin registrarla.

        Returns:
            Dict con ok/error y los datos validados
        """
        method = PaymentMethod.parse(payment_method)
        if method is None:
            return {'ok': False, 'error': f"Método de pago inválido: {payment_method}"}

        built = self._build_lines(cart_lines)
        if not built['ok']:
            return built

        subtotal = round(sum(line.line_total for line in built['lines']), 2)
        try:
            total = round(float(total), 2)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Total inválido'}
        if not math.isfinite(total):
            return {'ok': False, 'error': 'Total inválido'}
        if abs(total - subtotal) >= 0.005:
            return {
                'ok': False,
                'error': f'El total ({total:.2f}) no coincide con la suma de las líneas ({subtotal:.2f})'
            }

        built.update({'method': method, 'subtotal': subtotal, 'total': total})
        return built

    # =========================================================================
    # CREACIÓN DE VENTAS
    # =========================================================================

    @profile_function(name="Registrar venta")
    def add_sale(
        self,
        cart_lines: List[Dict[str, Any]],
        total: float,
        payment_method: Any,
        customer_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Registra una venta y descuenta el stock de cada línea.
        Una venta a crédito NO crea la deuda: eso es una llamada aparte
        (ver checkout()).

        Args:
            cart_lines: Líneas del carrito (id, quantity, price)
            total: Total cobrado (debe coincidir con la suma de líneas)
            payment_method: 'cash', 'card' o 'receivable'
            customer_name: Cliente (por defecto el cliente de mostrador)

        Returns:
            Dict con resultado (ok, error, sale)
        """
        if customer_name is not None and not isinstance(customer_name, str):
            return {'ok': False, 'error': 'Nombre de cliente inválido'}

        check = self.validate_sale(cart_lines, total, payment_method)
        if not check['ok']:
            return check

        sale = Sale(
            id=f"SALE-{uuid.uuid4().hex[:10]}",
            customer_name=(customer_name or '').strip() or self.walk_in_name,
            items=check['lines'],
            subtotal=check['subtotal'],
            tax=0.0,
            total=check['total'],
            date=datetime.now(timezone.utc).isoformat(),
            payment_method=check['method'],
        )
        sale_data = sale.to_dict()

        # Guardar venta
        self.sales_repo.create_sale(sale_data)

        # Descontar stock (una sola escritura del catálogo)
        updated = []
        for pid, qty in check['requested'].items():
            product = dict(check['products'][pid])
            product['stock'] = int(product.get('stock', 0)) - qty
            updated.append(product)
        self.product_repo.replace_many(updated)

        if self.audit_service:
            self.audit_service.log_sale_created(
                sale.id, sale.total, sale.payment_method.value, sale.customer_name,
                sum(check['requested'].values())
            )

        return {'ok': True, 'sale': sale_data}

    @profile_function(name="Confirmar carrito")
    def checkout(
        self,
        cart_lines: List[Dict[str, Any]],
        payment_method: Any,
        customer_name: Optional[str] = None,
        due_date: Any = None
    ) -> Dict[str, Any]:
        """
        Confirma el carrito: calcula el total, registra la venta y, si es a
        crédito, registra también la deuda del cliente por el mismo total.

        Args:
            cart_lines: Líneas del carrito
            payment_method: 'cash', 'card' o 'receivable'
            customer_name: Cliente (obligatorio a crédito)
            due_date: Vencimiento de la deuda (obligatorio a crédito)

        Returns:
            Dict con resultado (ok, error, sale, receivable)
        """
        method = PaymentMethod.parse(payment_method)
        if method is None:
            return {'ok': False, 'error': f"Método de pago inválido: {payment_method}"}

        try:
            total = round(sum(
                round(float(line.get('price', 0)), 2) * float(line.get('quantity', 0))
                for line in cart_lines or []
            ), 2)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Cantidad o precio inválido en el carrito'}
        if not math.isfinite(total):
            return {'ok': False, 'error': 'Cantidad o precio inválido en el carrito'}

        if method == PaymentMethod.RECEIVABLE:
            if self.receivables_service is None:
                return {'ok': False, 'error': 'Ventas a crédito no disponibles'}
            error = self.receivables_service.validate_receivable(customer_name, total, due_date)
            if error:
                return {'ok': False, 'error': error}

        result = self.add_sale(cart_lines, total, method, customer_name)
        if not result['ok']:
            return result

        if method == PaymentMethod.RECEIVABLE:
            debt = self.receivables_service.add_receivable(customer_name, total, due_date)
            result['receivable'] = debt.get('receivable')

        return result
