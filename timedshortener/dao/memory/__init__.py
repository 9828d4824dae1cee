from timedshortener.dao.memory.kv_memory_dao import KeyValueMemoryDAO


__all__ = [
    'KeyValueMemoryDAO',
]
