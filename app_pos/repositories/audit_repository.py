# ==============================================================================
# REPOSITORIO DE ACTIVIDAD
# ==============================================================================
# Encapsula todo el acceso a audit.json
# La actividad se almacena como lista: [{log1}, {log2}, ...], más reciente primero.
# No forma parte de las cuatro colecciones de la tienda: reset_all no la borra.
# ==============================================================================

import os
from typing import Any, Dict, List, Optional
from datetime import datetime

from app_pos.repositories.base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio para el registro de actividad.

    Formato de datos en audit.json:
    [
        {
            "type": "VENTA",
            "message": "Venta SALE-... registrada - Total: 30.00 ...",
            "timestamp": "2024-01-01 10:00:00",
            "related_id": "SALE-...",
            "details": {...}
        }
    ]
    """

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de actividad.

        Args:
            base_path: Directorio de datos
        """
        super().__init__(os.path.join(base_path, 'audit.json'))

    def load(self) -> List[Dict[str, Any]]:
        """
        Carga todos los registros.

        Returns:
            Lista de registros (más recientes primero)
        """
        return self.get_all()

    def log(
        self,
        log_type: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Registra un nuevo evento.

        Args:
            log_type: Tipo de evento (VENTA, PAGO, PRODUCTO, DEUDA, SERVICIO, SISTEMA)
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (venta, producto, deuda...)
            details: Detalles adicionales
        """
        log_entry = {
            'type': log_type,
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': related_id,
            'details': details or {}
        }

        logs = self.get_all()
        logs.insert(0, log_entry)
        # Mantener sólo los últimos MAX_LOGS registros
        self.save_all(logs[:self.MAX_LOGS])

    def filter_logs(self, log_type: Optional[str] = None, related_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Filtra registros por tipo y/o ID relacionado."""
        result = []
        for entry in self.get_all():
            if log_type and entry.get('type') != log_type:
                continue
            if related_id and entry.get('related_id') != related_id:
                continue
            result.append(entry)
        return result
