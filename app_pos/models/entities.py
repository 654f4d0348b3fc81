# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
# Las claves JSON se guardan en camelCase (formato de almacenamiento heredado).
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class PaymentMethod(str, Enum):
    """Métodos de pago aceptados en caja."""
    CASH = "cash"
    CARD = "card"
    RECEIVABLE = "receivable"   # Crédito de tienda (genera una cuenta por cobrar)

    @classmethod
    def parse(cls, value: Any) -> Optional['PaymentMethod']:
        """Convierte un valor crudo en método de pago ('visa' es el nombre antiguo de tarjeta)."""
        if isinstance(value, cls):
            return value
        raw = str(value or '').strip().lower()
        if raw == 'visa':
            return cls.CARD
        try:
            return cls(raw)
        except ValueError:
            return None


class ReceivableStatus(str, Enum):
    """Estados de una cuenta por cobrar (siempre derivados de pagado vs total)."""
    UNPAID = "Unpaid"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"


class JobStatus(str, Enum):
    """Estados de un trabajo de mantenimiento."""
    RECEIVED = "Received"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    AWAITING_COLLECTION = "Awaiting Collection"

    @property
    def is_finished(self) -> bool:
        """True para los estados de tipo 'terminado' (sellan la fecha de finalización)."""
        return self in (JobStatus.COMPLETED, JobStatus.AWAITING_COLLECTION)


def _money(value: Any) -> float:
    try:
        return round(float(value or 0), 2)
    except (TypeError, ValueError):
        return 0.0


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def receivable_status(amount_paid: float, total_amount: float) -> ReceivableStatus:
    """
    Regla única del estado de una cuenta por cobrar.

    Paid si lo pagado cubre el total; Partially Paid si ya hubo algún pago;
    Unpaid sólo mientras no se haya pagado nada.
    """
    if round(amount_paid, 2) >= round(total_amount, 2):
        return ReceivableStatus.PAID
    if amount_paid > 0:
        return ReceivableStatus.PARTIALLY_PAID
    return ReceivableStatus.UNPAID


# ==============================================================================
# ENTIDADES DE CATÁLOGO
# ==============================================================================

DEFAULT_IMAGE = 'https://placehold.co/300x300.png'


@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador único del producto
        name: Nombre del producto
        barcode: Código de barras (único en el catálogo, comparación exacta)
        cost: Costo de compra
        price: Precio de venta
        minimum_price: Precio mínimo permitido al vender
        stock: Unidades en existencia
        low_stock_threshold: Nivel de stock a partir del cual se alerta
        category: Categoría para clasificación
        supplier: Proveedor
        image: Referencia a la imagen
        purchase_date: Fecha de alta (YYYY-MM-DD)
    """
    id: str
    name: str
    barcode: str
    cost: float = 0.0
    price: float = 0.0
    minimum_price: float = 0.0
    stock: int = 0
    low_stock_threshold: int = 0
    category: str = ''
    supplier: str = ''
    image: str = DEFAULT_IMAGE
    purchase_date: str = ''

    @property
    def is_low_stock(self) -> bool:
        """Verifica si el stock está en o por debajo del umbral."""
        return self.stock <= self.low_stock_threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia JSON."""
        return {
            'id': self.id,
            'name': self.name,
            'barcode': self.barcode,
            'cost': self.cost,
            'price': self.price,
            'minimumPrice': self.minimum_price,
            'stock': self.stock,
            'lowStockThreshold': self.low_stock_threshold,
            'category': self.category,
            'supplier': self.supplier,
            'image': self.image,
            'purchaseDate': self.purchase_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario (formato JSON)."""
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            barcode=str(data.get('barcode', '')),
            cost=_money(data.get('cost')),
            price=_money(data.get('price')),
            minimum_price=_money(data.get('minimumPrice')),
            stock=_int(data.get('stock')),
            low_stock_threshold=_int(data.get('lowStockThreshold')),
            category=data.get('category') or '',
            supplier=data.get('supplier') or '',
            image=data.get('image') or DEFAULT_IMAGE,
            purchase_date=data.get('purchaseDate', ''),
        )


# ==============================================================================
# ENTIDADES DE VENTA
# ==============================================================================

@dataclass
class CartLine:
    """
    Línea del carrito: copia del producto + cantidad + precio unitario.

    Es transitoria; sólo se persiste dentro de una venta (copia desnormalizada,
    los cambios posteriores al producto no la alteran).
    """
    product: Product
    quantity: int
    price: float

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)

    @property
    def line_cost(self) -> float:
        return round(self.product.cost * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        """Formato guardado en la venta: datos del producto con cantidad y precio de la línea."""
        d = self.product.to_dict()
        d['price'] = self.price
        d['quantity'] = self.quantity
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartLine':
        """Crea instancia desde diccionario."""
        return cls(
            product=Product.from_dict(data),
            quantity=_int(data.get('quantity')),
            price=_money(data.get('price')),
        )


@dataclass
class Sale:
    """
    Venta registrada. Inmutable una vez creada.

    Attributes:
        id: Identificador de la venta
        customer_name: Cliente (por defecto el cliente de mostrador)
        items: Líneas vendidas
        subtotal: Suma de las líneas
        tax: Impuesto (siempre 0)
        total: Total cobrado
        date: Timestamp ISO 8601
        payment_method: Efectivo, tarjeta o crédito de tienda
    """
    id: str
    customer_name: str
    items: List[CartLine] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    date: str = ''
    payment_method: PaymentMethod = PaymentMethod.CASH

    @property
    def cost_total(self) -> float:
        return round(sum(line.line_cost for line in self.items), 2)

    @property
    def profit(self) -> float:
        return round(self.total - self.cost_total, 2)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'customerName': self.customer_name,
            'items': [line.to_dict() for line in self.items],
            'subtotal': self.subtotal,
            'tax': self.tax,
            'total': self.total,
            'date': self.date,
            'paymentMethod': self.payment_method.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        """Crea instancia desde diccionario."""
        return cls(
            id=str(data.get('id', '')),
            customer_name=data.get('customerName', ''),
            items=[CartLine.from_dict(i) for i in data.get('items', [])],
            subtotal=_money(data.get('subtotal')),
            tax=_money(data.get('tax')),
            total=_money(data.get('total')),
            date=data.get('date', ''),
            payment_method=PaymentMethod.parse(data.get('paymentMethod')) or PaymentMethod.CASH,
        )


# ==============================================================================
# ENTIDADES DE CUENTAS POR COBRAR
# ==============================================================================

@dataclass
class Receivable:
    """
    Deuda de un cliente generada por una venta a crédito.

    El estado nunca se guarda de forma independiente: se recalcula
    con receivable_status() cada vez que cambia lo pagado.
    """
    id: str
    customer_name: str
    total_amount: float
    amount_paid: float = 0.0
    issue_date: str = ''
    due_date: str = ''

    @property
    def status(self) -> ReceivableStatus:
        return receivable_status(self.amount_paid, self.total_amount)

    @property
    def balance(self) -> float:
        """Monto pendiente de pago."""
        return round(max(0.0, self.total_amount - self.amount_paid), 2)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'customerName': self.customer_name,
            'totalAmount': self.total_amount,
            'amountPaid': self.amount_paid,
            'issueDate': self.issue_date,
            'dueDate': self.due_date,
            'status': self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Receivable':
        """Crea instancia desde diccionario (el estado guardado se ignora y se recalcula)."""
        return cls(
            id=str(data.get('id', '')),
            customer_name=data.get('customerName', ''),
            total_amount=_money(data.get('totalAmount')),
            amount_paid=_money(data.get('amountPaid')),
            issue_date=data.get('issueDate', ''),
            due_date=data.get('dueDate', ''),
        )


# ==============================================================================
# ENTIDADES DE MANTENIMIENTO
# ==============================================================================

@dataclass
class MaintenanceJob:
    """
    Orden de servicio técnico.

    Attributes:
        id: Identificador de la orden
        customer_name: Cliente que deja el equipo
        product_name: Equipo recibido
        issue_description: Falla reportada
        status: Estado actual
        date_received: Fecha de recepción (YYYY-MM-DD)
        cost: Costo de la reparación
        notes: Notas opcionales
        completion_date: Fecha de finalización, se fija una sola vez
    """
    id: str
    customer_name: str
    product_name: str
    issue_description: str
    status: JobStatus = JobStatus.RECEIVED
    date_received: str = ''
    cost: float = 0.0
    notes: Optional[str] = None
    completion_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        d = {
            'id': self.id,
            'customerName': self.customer_name,
            'productName': self.product_name,
            'issueDescription': self.issue_description,
            'status': self.status.value,
            'dateReceived': self.date_received,
            'cost': self.cost,
        }
        if self.notes is not None:
            d['notes'] = self.notes
        if self.completion_date is not None:
            d['completionDate'] = self.completion_date
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MaintenanceJob':
        """Crea instancia desde diccionario."""
        try:
            status = JobStatus(data.get('status', 'Received'))
        except ValueError:
            status = JobStatus.RECEIVED
        return cls(
            id=str(data.get('id', '')),
            customer_name=data.get('customerName', ''),
            product_name=data.get('productName', ''),
            issue_description=data.get('issueDescription', ''),
            status=status,
            date_received=data.get('dateReceived', ''),
            cost=_money(data.get('cost')),
            notes=data.get('notes'),
            completion_date=data.get('completionDate') or None,
        )
