import json
from dataclasses import dataclass
from typing import Any

from timedshortener.dao.exceptions import MalformedRecordError


@dataclass(frozen=True)
class RateRecordModel:
    """Requests admitted for one identity within its current fixed window.

    Attributes:
        count (int):
            Number of admitted requests in the window.
        expires (int):
            End of the window as epoch milliseconds.

    Example:
        >>> record = RateRecordModel(count=1, expires=1760000060000)
        >>> record.to_json()
        '{"count": 1, "expires": 1760000060000}'
        >>> record.incremented().count
        2
    """

    count: int
    expires: int

    def incremented(self) -> 'RateRecordModel':
        return RateRecordModel(count=self.count + 1, expires=self.expires)

    def to_json(self) -> str:
        return json.dumps({'count': self.count, 'expires': self.expires})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'RateRecordModel':
        try:
            return cls(count=int(data['count']), expires=int(data['expires']))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError(f'Rate record {data!r} is missing count/expires.') from e
