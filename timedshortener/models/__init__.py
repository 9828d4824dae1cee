from timedshortener.models.link_model import LinkModel
from timedshortener.models.rate_record_model import RateRecordModel


__all__ = [
    'LinkModel',
    'RateRecordModel',
]
