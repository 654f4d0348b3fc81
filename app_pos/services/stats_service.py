# ==============================================================================
# SERVICIO DE ESTADÍSTICAS Y CONSULTAS DERIVADAS
# ==============================================================================
# Valores que se calculan al leer y nunca se guardan:
#   - Stock bajo, categorías, valorización del inventario
#   - Ventas de hoy, reporte de ventas por rango y categoría
#   - Deudas vencidas
#
# Las funciones de módulo son puras (reciben las colecciones); StatsService
# sólo las aplica sobre los repositorios para que todos calculen igual.
# ==============================================================================

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from app_pos.models.entities import Product, Sale
from app_pos.repositories.product_repository import ProductRepository
from app_pos.repositories.receivable_repository import ReceivableRepository
from app_pos.repositories.sales_repository import SalesRepository
from app_pos.services.receivables_service import is_overdue, parse_datetime


# ==============================================================================
# FUNCIONES PURAS
# ==============================================================================

def is_low_stock(product: Dict[str, Any]) -> bool:
    """Stock en o por debajo del umbral del producto."""
    return Product.from_dict(product).is_low_stock


def low_stock_products(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [p for p in products if is_low_stock(p)]


def categories(products: List[Dict[str, Any]]) -> List[str]:
    """Categorías distintas y no vacías, en orden de aparición."""
    seen = []
    for p in products:
        cat = p.get('category')
        if cat and cat not in seen:
            seen.append(cat)
    return seen


def inventory_valuation(products: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Valor del stock a precio de venta, a costo y a precio mínimo.

    Returns:
        Dict con total_sale_value, total_cost_value, total_min_value
    """
    items = [Product.from_dict(p) for p in products]
    return {
        'total_sale_value': round(sum(p.price * p.stock for p in items), 2),
        'total_cost_value': round(sum(p.cost * p.stock for p in items), 2),
        'total_min_value': round(sum(p.minimum_price * p.stock for p in items), 2),
    }


def _local_date(iso_value: str) -> Optional[date]:
    parsed = parse_datetime(iso_value)
    if parsed is None:
        return None
    return parsed.astimezone().date()


def todays_sales_total(sales: List[Dict[str, Any]], today: Optional[date] = None) -> float:
    """Suma de las ventas cuyo timestamp cae en la fecha local de hoy."""
    today = today or date.today()
    return round(sum(
        float(s.get('total', 0)) for s in sales
        if _local_date(s.get('date', '')) == today
    ), 2)


def sales_report(
    sales: List[Dict[str, Any]],
    start: Optional[date] = None,
    end: Optional[date] = None,
    category: Optional[str] = None
) -> Dict[str, Any]:
    """
    Reporte de ventas por rango de fechas (inclusive) y categoría.

    La ganancia usa el costo copiado en cada línea al momento de la venta,
    así que editar o borrar productos no altera reportes pasados.

    Returns:
        Dict con total_revenue, total_profit, number_of_sales,
        sales_by_day [{date, total}] y latest_sales (5 más recientes)
    """
    filtered = []
    for data in sales:
        day = _local_date(data.get('date', ''))
        if day is None:
            continue
        if start and day < start:
            continue
        if end and day > end:
            continue
        if category and category != 'all' and not any(
            item.get('category') == category for item in data.get('items', [])
        ):
            continue
        filtered.append((day, data))

    by_day = defaultdict(float)
    revenue = 0.0
    profit = 0.0
    for day, data in filtered:
        sale = Sale.from_dict(data)
        revenue += sale.total
        profit += sale.profit
        by_day[day.isoformat()] += sale.total

    def _sort_key(data):
        parsed = parse_datetime(data.get('date', ''))
        return parsed or datetime.min.replace(tzinfo=timezone.utc)

    latest = sorted((d for _, d in filtered), key=_sort_key, reverse=True)[:5]

    return {
        'total_revenue': round(revenue, 2),
        'total_profit': round(profit, 2),
        'number_of_sales': len(filtered),
        'sales_by_day': [
            {'date': day, 'total': round(total, 2)}
            for day, total in sorted(by_day.items())
        ],
        'latest_sales': latest,
    }


def overdue_receivables(receivables: List[Dict[str, Any]], today: Optional[date] = None) -> List[Dict[str, Any]]:
    return [r for r in receivables if is_overdue(r, today)]


# ==============================================================================
# SERVICIO
# ==============================================================================

class StatsService:
    """
    Servicio de consultas derivadas sobre las colecciones canónicas.

    Responsabilidades:
    - Alertas de stock bajo y lista de categorías
    - Valorización del inventario
    - Ventas del día y reportes
    - Deudas vencidas
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        sales_repo: SalesRepository,
        receivable_repo: ReceivableRepository
    ):
        self.product_repo = product_repo
        self.sales_repo = sales_repo
        self.receivable_repo = receivable_repo

    def low_stock_products(self) -> List[Dict[str, Any]]:
        return low_stock_products(self.product_repo.all())

    def categories(self) -> List[str]:
        return categories(self.product_repo.all())

    def inventory_valuation(self) -> Dict[str, float]:
        return inventory_valuation(self.product_repo.all())

    def todays_sales_total(self, today: Optional[date] = None) -> float:
        return todays_sales_total(self.sales_repo.all(), today)

    def sales_report(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category: Optional[str] = None
    ) -> Dict[str, Any]:
        return sales_report(self.sales_repo.all(), start, end, category)

    def overdue_receivables(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        return overdue_receivables(self.receivable_repo.all(), today)
