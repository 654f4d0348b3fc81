# ==============================================================================
# APLICACIÓN WEB - API JSON del punto de venta
# ==============================================================================
# Las rutas sólo traducen HTTP <-> servicios. Toda regla de negocio vive en
# services/ y se obtiene del contenedor guardado en app.extensions['app_pos'].
#
# Formato de respuesta:
#   {"success": true, ...}
#   {"success": false, "error": "..."}  → 400 validación, 404 ID desconocido
# ==============================================================================

import os
from datetime import date
from typing import Any, Dict, Mapping, Optional

from flask import Flask, current_app, request, session
from werkzeug.exceptions import HTTPException

from app_pos.app_container import AppContainer
from app_pos.config import Config
from app_pos import performance_logger
from app_pos.performance_logger import init_profiling
from app_pos.services.receivables_service import is_overdue

# Clave de la sesión donde vive el carrito
CART_SESSION_KEY = 'carrito'


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def get_container() -> AppContainer:
    """Contenedor de la aplicación activa."""
    return current_app.extensions['app_pos']


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _result_response(result: Dict[str, Any], **extra):
    """
    Convierte el dict {'ok', 'error', ...} de un servicio en respuesta JSON.
    """
    if not result.get('ok'):
        status = 404 if result.get('not_found') else 400
        return {"success": False, "error": result.get('error', 'Operación inválida')}, status
    payload = {"success": True}
    payload.update({k: v for k, v in result.items() if k != 'ok'})
    payload.update(extra)
    return payload


def _parse_day(value: Optional[str]) -> Optional[date]:
    """Fecha YYYY-MM-DD de un query param (ValueError si es inválida)."""
    if not value:
        return None
    return date.fromisoformat(value[:10])


def _get_cart():
    return session.get(CART_SESSION_KEY, [])


def _save_cart(cart):
    session[CART_SESSION_KEY] = cart
    session.modified = True


def _cart_payload(cart):
    return get_container().cart_service.cart_totals(cart)


# ═══════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Crea la aplicación Flask con su propio contenedor de dependencias.

    Args:
        overrides: Claves de configuración a sobreescribir (DATA_DIR, LOGS_DIR,
                   SECRET_KEY, ENABLE_PROFILING, WALK_IN_NAME, TESTING, ...)

    Returns:
        Aplicación lista para servir
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    if app.config['PRODUCTION_MODE'] and not os.environ.get('APP_POS_SECRET_KEY') \
            and 'SECRET_KEY' not in (overrides or {}):
        print("[ADVERTENCIA] APP_POS_PRODUCTION activo sin APP_POS_SECRET_KEY definida")
        print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")
    if app.config['PRODUCTION_MODE']:
        app.config['SESSION_COOKIE_SECURE'] = True

    app.extensions['app_pos'] = AppContainer(
        base_path=app.config['DATA_DIR'],
        walk_in_name=app.config['WALK_IN_NAME'],
        currency=app.config['CURRENCY'],
    )

    # Profiling de rutas y funciones. Logs en LOGS_DIR
    performance_logger.configure(
        logs_dir=app.config['LOGS_DIR'],
        enabled=app.config['ENABLE_PROFILING'],
    )
    init_profiling(app)

    _register_error_handlers(app)
    _register_catalog_routes(app)
    _register_cart_routes(app)
    _register_sales_routes(app)
    _register_receivable_routes(app)
    _register_maintenance_routes(app)
    _register_admin_routes(app)

    return app


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return {"success": False, "error": e.description}, e.code

    @app.errorhandler(Exception)
    def _unexpected_error(e):
        # Capturar cualquier error inesperado y devolver JSON
        print(f"[ERROR] {request.method} {request.path}: {e}")
        return {"success": False, "error": f"Error interno: {str(e)}"}, 500


# ═══════════════════════════════════════════════════════════════════════════
# CATÁLOGO
# ═══════════════════════════════════════════════════════════════════════════

def _register_catalog_routes(app: Flask) -> None:

    @app.route("/api/products", methods=["GET"])
    def api_products():
        """Catálogo filtrado por ?q= (nombre o código) y ?category="""
        catalog = get_container().catalog_service
        products = catalog.search_products(
            request.args.get('q', ''),
            request.args.get('category')
        )
        return {"success": True, "products": products}

    @app.route("/api/products", methods=["POST"])
    def api_products_create():
        result = get_container().catalog_service.add_product(_json_body())
        if result.get('ok'):
            return _result_response(result), 201
        return _result_response(result)

    @app.route("/api/products/<product_id>", methods=["PATCH"])
    def api_products_update(product_id):
        return _result_response(
            get_container().catalog_service.update_product(product_id, _json_body())
        )

    @app.route("/api/products/<product_id>", methods=["DELETE"])
    def api_products_delete(product_id):
        return _result_response(get_container().catalog_service.delete_product(product_id))

    @app.route("/api/products/barcode", methods=["GET"])
    def api_products_barcode():
        """Código de barras libre para el formulario de alta."""
        return {"success": True, "barcode": get_container().catalog_service.generate_barcode()}

    @app.route("/api/products/low-stock", methods=["GET"])
    def api_products_low_stock():
        return {"success": True, "products": get_container().stats_service.low_stock_products()}

    @app.route("/api/categories", methods=["GET"])
    def api_categories():
        return {"success": True, "categories": get_container().stats_service.categories()}

    @app.route("/api/inventory/summary", methods=["GET"])
    def api_inventory_summary():
        stats = get_container().stats_service
        payload = {"success": True}
        payload.update(stats.inventory_valuation())
        payload['low_stock_count'] = len(stats.low_stock_products())
        return payload


# ═══════════════════════════════════════════════════════════════════════════
# CARRITO (almacenado en session)
# ═══════════════════════════════════════════════════════════════════════════

def _register_cart_routes(app: Flask) -> None:

    @app.route("/api/cart", methods=["GET"])
    def api_cart():
        """Ver contenido actual del carrito"""
        payload = {"success": True}
        payload.update(_cart_payload(_get_cart()))
        return payload

    @app.route("/api/cart/add", methods=["POST"])
    def api_cart_add():
        """Agrega una unidad. Espera JSON con: product_id"""
        data = _json_body()
        product_id = data.get('product_id')
        if not product_id:
            return {"success": False, "error": "ID de producto inválido"}, 400

        result = get_container().cart_service.add_to_cart(_get_cart(), str(product_id))
        if result.get('ok'):
            _save_cart(result['cart'])
        return _cart_result(result)

    @app.route("/api/cart/quantity", methods=["POST"])
    def api_cart_quantity():
        """Cambia la cantidad. Espera JSON con: product_id, quantity (<= 0 elimina)"""
        data = _json_body()
        result = get_container().cart_service.update_quantity(
            _get_cart(), str(data.get('product_id', '')), data.get('quantity')
        )
        if result.get('ok'):
            _save_cart(result['cart'])
        return _cart_result(result)

    @app.route("/api/cart/price", methods=["POST"])
    def api_cart_price():
        """
        Cambia el precio unitario.
        Espera JSON con: product_id, price, finalize (true al salir del campo)
        """
        data = _json_body()
        result = get_container().cart_service.update_price(
            _get_cart(),
            str(data.get('product_id', '')),
            data.get('price'),
            finalize=bool(data.get('finalize', False))
        )
        if result.get('ok'):
            _save_cart(result['cart'])
        return _cart_result(result)

    @app.route("/api/cart/clear", methods=["POST"])
    def api_cart_clear():
        """Vaciar el carrito"""
        _save_cart([])
        return {"success": True, "mensaje": "Carrito vaciado"}


def _cart_result(result: Dict[str, Any]):
    """Respuesta de una operación de carrito con los totales actualizados."""
    if not result.get('ok'):
        response, status = _result_response(result)
        if 'available' in result:
            response['available'] = result['available']
        return response, status
    extra = {k: v for k, v in result.items() if k not in ('ok', 'cart')}
    payload = {"success": True, "cart": _cart_payload(result['cart'])}
    payload.update(extra)
    return payload


# ═══════════════════════════════════════════════════════════════════════════
# VENTAS Y REPORTES
# ═══════════════════════════════════════════════════════════════════════════

def _register_sales_routes(app: Flask) -> None:

    @app.route("/api/checkout", methods=["POST"])
    def api_checkout():
        """
        Confirma el carrito de la sesión y crea la venta.

        Body JSON:
        {
            "payment_method": "cash" | "card" | "receivable",
            "customer_name": "...",   (obligatorio a crédito)
            "due_date": "YYYY-MM-DD"  (obligatorio a crédito)
        }
        """
        cart = _get_cart()
        if not cart:
            return {"success": False, "error": "El carrito está vacío"}, 400

        data = _json_body()
        result = get_container().sales_service.checkout(
            cart,
            data.get('payment_method'),
            customer_name=data.get('customer_name'),
            due_date=data.get('due_date')
        )
        if not result.get('ok'):
            return _result_response(result)

        # Limpiar carrito solo si la venta fue exitosa
        _save_cart([])
        response = _result_response(result)
        response['mensaje'] = f"Venta {result['sale']['id']} registrada"
        return response, 201

    @app.route("/api/sales", methods=["GET"])
    def api_sales():
        return {"success": True, "sales": get_container().sales_service.get_all_sales()}

    @app.route("/api/sales/today", methods=["GET"])
    def api_sales_today():
        return {"success": True, "total": get_container().stats_service.todays_sales_total()}

    @app.route("/api/reports/sales", methods=["GET"])
    def api_reports_sales():
        """Reporte por ?start=YYYY-MM-DD&end=YYYY-MM-DD&category="""
        try:
            start = _parse_day(request.args.get('start'))
            end = _parse_day(request.args.get('end'))
        except ValueError:
            return {"success": False, "error": "Fecha inválida (usar YYYY-MM-DD)"}, 400

        report = get_container().stats_service.sales_report(
            start, end, request.args.get('category')
        )
        payload = {"success": True}
        payload.update(report)
        return payload


# ═══════════════════════════════════════════════════════════════════════════
# CUENTAS POR COBRAR
# ═══════════════════════════════════════════════════════════════════════════

def _register_receivable_routes(app: Flask) -> None:

    @app.route("/api/receivables", methods=["GET"])
    def api_receivables():
        """Libro filtrado por ?tab=all|paid|unpaid y ?search="""
        tab = request.args.get('tab', 'all')
        if tab not in ('all', 'paid', 'unpaid'):
            return {"success": False, "error": f"Pestaña inválida: {tab}"}, 400

        receivables = get_container().receivables_service.filter_receivables(
            tab, request.args.get('search', '')
        )
        today = date.today()
        return {
            "success": True,
            "receivables": [dict(r, overdue=is_overdue(r, today)) for r in receivables]
        }

    @app.route("/api/receivables", methods=["POST"])
    def api_receivables_create():
        data = _json_body()
        result = get_container().receivables_service.add_receivable(
            data.get('customer_name'), data.get('total_amount'), data.get('due_date')
        )
        if result.get('ok'):
            return _result_response(result), 201
        return _result_response(result)

    @app.route("/api/receivables/<receivable_id>/payments", methods=["POST"])
    def api_receivables_payment(receivable_id):
        """Registra un abono. Espera JSON con: amount"""
        data = _json_body()
        return _result_response(
            get_container().receivables_service.add_payment(receivable_id, data.get('amount'))
        )

    @app.route("/api/receivables/summary", methods=["GET"])
    def api_receivables_summary():
        service = get_container().receivables_service
        payload = {"success": True}
        payload.update(service.receivables_summary())
        payload['overdue_count'] = len(service.overdue_receivables())
        return payload


# ═══════════════════════════════════════════════════════════════════════════
# MANTENIMIENTO
# ═══════════════════════════════════════════════════════════════════════════

def _register_maintenance_routes(app: Flask) -> None:

    @app.route("/api/maintenance", methods=["GET"])
    def api_maintenance():
        """Órdenes por ?date=YYYY-MM-DD y ?state=open|finished"""
        try:
            day = _parse_day(request.args.get('date'))
        except ValueError:
            return {"success": False, "error": "Fecha inválida (usar YYYY-MM-DD)"}, 400

        service = get_container().maintenance_service
        state = request.args.get('state', 'all')
        if state == 'open':
            jobs = service.open_jobs(day)
        elif state == 'finished':
            jobs = service.finished_jobs(day)
        elif state == 'all':
            jobs = service.jobs_by_date(day)
        else:
            return {"success": False, "error": f"Estado inválido: {state}"}, 400
        return {"success": True, "jobs": jobs}

    @app.route("/api/maintenance", methods=["POST"])
    def api_maintenance_create():
        data = _json_body()
        result = get_container().maintenance_service.add_job(
            data.get('customer_name'),
            data.get('product_name'),
            data.get('issue_description'),
            notes=data.get('notes')
        )
        if result.get('ok'):
            return _result_response(result), 201
        return _result_response(result)

    @app.route("/api/maintenance/<job_id>", methods=["PATCH"])
    def api_maintenance_update(job_id):
        return _result_response(
            get_container().maintenance_service.update_job(job_id, _json_body())
        )


# ═══════════════════════════════════════════════════════════════════════════
# ADMINISTRACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def _register_admin_routes(app: Flask) -> None:

    @app.route("/api/admin/reset", methods=["POST"])
    def api_admin_reset():
        """Restablece productos, ventas, deudas y órdenes a los valores por defecto."""
        get_container().reset_all()
        _save_cart([])
        return {"success": True, "mensaje": "Datos restablecidos"}

    @app.route("/api/admin/performance", methods=["GET"])
    def api_admin_performance():
        """Estadísticas de funciones perfiladas; también escribe el reporte en LOGS_DIR."""
        performance_logger.write_function_stats_report()
        return {"success": True, "functions": performance_logger.get_function_stats()}

    @app.route("/api/activity", methods=["GET"])
    def api_activity():
        """Registro de actividad por ?type= y ?related_id="""
        try:
            limit = int(request.args.get('limit', 100))
        except ValueError:
            return {"success": False, "error": "Límite inválido"}, 400
        logs = get_container().audit_service.get_logs(
            request.args.get('type'), request.args.get('related_id'), limit
        )
        return {"success": True, "logs": logs}


if __name__ == "__main__":
    # Configuración para desarrollo local y acceso desde red WiFi
    # En producción usar WSGI (gunicorn, waitress, etc.)
    app = create_app()
    HOST = app.config['HOST']
    PORT = app.config['PORT']
    DEBUG = app.config['DEBUG']

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{HOST}:{PORT}")
        print(f"  Acceso local: http://localhost:{PORT}")
        print(f"{'='*50}\n")

    app.run(host=HOST, port=PORT, debug=DEBUG)
