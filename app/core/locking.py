"""
Secciones críticas por clave (nombre de item, venta) y bloqueo de filas.

Cada operación que toca stock adquiere las claves de los items afectados
en orden ordenado, de modo que operaciones sobre items disjuntos corren en
paralelo y operaciones sobre el mismo item se serializan. En PostgreSQL las
filas se bloquean además con SELECT ... FOR UPDATE para cubrir varios
procesos worker.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List

class _LockEntry:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0

class KeyedLockRegistry:
    """Locks de proceso indexados por clave, liberados cuando nadie los usa"""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[str, _LockEntry] = {}

    def _checkout(self, key: str) -> _LockEntry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.holders += 1
            return entry

    def _checkin(self, key: str):
        with self._guard:
            entry = self._entries[key]
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[List[str]]:
        """Adquirir todas las claves (ordenadas, sin duplicados) hasta salir del bloque"""
        ordered = sorted(set(keys))
        acquired = []
        try:
            for key in ordered:
                entry = self._checkout(key)
                try:
                    entry.lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append((key, entry))
            yield ordered
        finally:
            for key, entry in reversed(acquired):
                entry.lock.release()
                self._checkin(key)

    def active_keys(self) -> List[str]:
        with self._guard:
            return sorted(self._entries)

# Registro compartido por todos los servicios del proceso
stock_locks = KeyedLockRegistry()

def item_keys(item_names: Iterable[str]) -> List[str]:
    """Claves de bloqueo para items de inventario"""
    return [f"item:{name}" for name in item_names]

def lock_for_update(query):
    """
    Bloqueo de filas para operaciones críticas.

    NOTA: SQLite ignora SELECT ... FOR UPDATE; PostgreSQL lo respeta.
    """
    return query.with_for_update().populate_existing()
