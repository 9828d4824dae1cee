from timedshortener.dao.base.kv_base_dao import KeyValueBaseDAO


__all__ = [
    'KeyValueBaseDAO',
]
