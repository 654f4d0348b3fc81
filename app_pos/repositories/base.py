# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================
# Cada colección vive en su propio archivo <clave>.json dentro del directorio
# de datos. La copia en memoria es la fuente de verdad de la sesión; cada
# cambio se escribe completo al archivo (write-through, sin lotes).
# ==============================================================================

import copy
import json
import os
from typing import Any, Callable, Dict, List, Optional
from abc import ABC, abstractmethod
import threading


class StorageError(Exception):
    """Error de lectura/escritura del almacenamiento durable."""
    pass


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona funcionalidad común para lectura/escritura de archivos JSON
    con escritura atómica (archivo temporal + reemplazo).
    """

    # Lock global para evitar escrituras cruzadas a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura de datos a usar cuando el archivo no sirve.
        Debe ser implementado por cada repositorio concreto.
        """
        pass

    def exists(self) -> bool:
        """True si el archivo de datos existe en disco."""
        return os.path.exists(self.file_path)

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados del JSON

        Raises:
            StorageError: Si el archivo no existe, no se puede leer o no es JSON válido
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError as e:
                raise StorageError(f"{os.path.basename(self.file_path)} no existe") from e
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise StorageError(f"{os.path.basename(self.file_path)} corrupto: {e}") from e
            except OSError as e:
                raise StorageError(f"No se pudo leer {self.file_path}: {e}") from e

    def _write_raw(self, data: Any) -> bool:
        """
        Escribe datos al archivo JSON.
        Los errores se informan y se ignoran: la persistencia es de mejor esfuerzo.

        Args:
            data: Datos a serializar y escribir

        Returns:
            True si se escribió correctamente
        """
        with self._file_lock:
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                directory = os.path.dirname(self.file_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                # Reemplazar archivo original (operación atómica en la mayoría de sistemas)
                os.replace(temp_path, self.file_path)
                return True
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    try:
                        os.remove(temp_path)
                    except OSError:
                        pass
                print(f"[PERSISTENCIA ERROR] No se pudo guardar {os.path.basename(self.file_path)}: {e}")
                return False

    def _remove_file(self) -> bool:
        """Elimina el archivo de datos si existe."""
        with self._file_lock:
            try:
                if os.path.exists(self.file_path):
                    os.remove(self.file_path)
                return True
            except OSError as e:
                print(f"[PERSISTENCIA ERROR] No se pudo eliminar {os.path.basename(self.file_path)}: {e}")
                return False


class ListRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como lista.

    Ejemplo: audit.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        """Retorna lista vacía."""
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros desde el archivo.

        Returns:
            Lista con todos los datos (vacía si el archivo no existe o no sirve)
        """
        try:
            data = self._read_raw()
        except StorageError:
            return self._empty_data()
        return data if isinstance(data, list) else self._empty_data()

    def save_all(self, data: List[Dict[str, Any]]) -> bool:
        """
        Guarda todos los registros (reemplazo completo).

        Args:
            data: Lista completa de datos
        """
        return self._write_raw(data)


class CollectionRepository(ListRepository):
    """
    Colección con copia en memoria y valores por defecto.

    - Al iniciar carga el archivo <clave>.json; si falta o está corrupto
      usa el conjunto por defecto y lo informa.
    - Cada mutación escribe la colección completa.
    - Las lecturas devuelven copias (snapshots) para que nadie altere
      la colección sin pasar por el repositorio.
    """

    #: Clave de almacenamiento (nombre del archivo sin extensión)
    key: str = ''

    def __init__(self, base_path: str, defaults: Optional[Callable[[], List[Dict[str, Any]]]] = None):
        """
        Inicializa la colección.

        Args:
            base_path: Directorio de datos
            defaults: Función que retorna una copia nueva del conjunto por defecto
        """
        super().__init__(os.path.join(base_path, f'{self.key}.json'))
        self._defaults = defaults or (lambda: [])
        self._items: List[Dict[str, Any]] = []
        self.loaded_from_defaults = False
        self.load()

    def load(self) -> List[Dict[str, Any]]:
        """
        Carga la colección desde disco (o desde los valores por defecto).

        Returns:
            Snapshot de la colección cargada
        """
        try:
            data = self._read_raw()
            if not isinstance(data, list):
                raise StorageError(f"{self.key}: se esperaba una lista")
            self._items = data
            self.loaded_from_defaults = False
        except StorageError as e:
            if self.exists():
                print(f"[ADVERTENCIA] {e}. Usando datos por defecto para '{self.key}'")
            else:
                print(f"[PERSISTENCIA] '{self.key}' sin datos guardados, usando datos por defecto")
            self._items = self._defaults()
            self.loaded_from_defaults = True
        return self.all()

    def reload(self) -> List[Dict[str, Any]]:
        """Fuerza recarga desde archivo descartando la copia en memoria."""
        return self.load()

    # =========================================================================
    # LECTURA
    # =========================================================================

    def all(self) -> List[Dict[str, Any]]:
        """Snapshot de todos los registros, en el orden guardado."""
        return copy.deepcopy(self._items)

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Args:
            record_id: ID del registro

        Returns:
            Copia del registro o None si no existe
        """
        index = self._index_of(record_id)
        if index is None:
            return None
        return copy.deepcopy(self._items[index])

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """
        Busca un registro por un campo específico.

        Args:
            field: Nombre del campo
            value: Valor a buscar (comparación exacta)

        Returns:
            Copia del primer registro que coincide o None
        """
        for record in self._items:
            if record.get(field) == value:
                return copy.deepcopy(record)
        return None

    def __len__(self) -> int:
        return len(self._items)

    def _index_of(self, record_id: str) -> Optional[int]:
        for i, record in enumerate(self._items):
            if str(record.get('id')) == str(record_id):
                return i
        return None

    # =========================================================================
    # ESCRITURA (siempre write-through)
    # =========================================================================

    def persist(self) -> bool:
        """Escribe la colección completa al archivo."""
        return self.save_all(self._items)

    def prepend(self, record: Dict[str, Any]) -> None:
        """
        Agrega un registro al inicio (más reciente primero).

        Args:
            record: Datos del nuevo registro
        """
        self._items.insert(0, copy.deepcopy(record))
        self.persist()

    def replace(self, record_id: str, record: Dict[str, Any]) -> bool:
        """
        Reemplaza un registro existente.

        Returns:
            True si se actualizó, False si no existía
        """
        index = self._index_of(record_id)
        if index is None:
            return False
        self._items[index] = copy.deepcopy(record)
        self.persist()
        return True

    def replace_many(self, records: List[Dict[str, Any]]) -> None:
        """
        Reemplaza varios registros con una sola escritura.
        Los IDs que no existen se ignoran.
        """
        by_id = {str(r.get('id')): r for r in records}
        for i, current in enumerate(self._items):
            new = by_id.get(str(current.get('id')))
            if new is not None:
                self._items[i] = copy.deepcopy(new)
        self.persist()

    def remove(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Elimina un registro.

        Returns:
            Datos del registro eliminado o None si no existía
        """
        index = self._index_of(record_id)
        if index is None:
            return None
        removed = self._items.pop(index)
        self.persist()
        return removed

    def reset(self) -> None:
        """Borra el archivo y restaura los datos por defecto en memoria."""
        self._remove_file()
        self._items = self._defaults()
        self.loaded_from_defaults = True
