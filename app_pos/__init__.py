# ==============================================================================
# APP_POS - Punto de venta, inventario, cuentas por cobrar y mantenimiento
# ==============================================================================
# Estructura:
# ├── models/         → Entidades (dataclasses) y datos por defecto
# ├── repositories/   → Persistencia en archivos JSON (una clave por colección)
# ├── services/       → Lógica de negocio (catálogo, carrito, ventas, deudas, ...)
# ├── app_container.py → Contenedor explícito de repositorios y servicios
# ├── config.py       → Configuración por variables de entorno
# └── main.py         → API JSON con Flask (create_app)
# ==============================================================================

__version__ = '1.0.0'
