import json
from dataclasses import dataclass
from typing import Optional

from timedshortener.dao.exceptions import MalformedRecordError


@dataclass(frozen=True)
class LinkModel:
    """Represent a short-lived code to payload mapping.

    Attributes:
        code (str):
            The short code clients type in to resolve the payload.
        payload (str):
            The opaque value stored under the code (usually an encrypted URL).
            Returned verbatim, never re-derived.
        expires_at (Optional[int]):
            Absolute expiry as epoch milliseconds, after which the store
            forgets the mapping. None when the remaining TTL is unknown.

    Example:
        >>> link = LinkModel(code='A12345', payload='secret-payload', expires_at=1760000300000)
        >>> link.to_json()
        '{"payload": "secret-payload"}'
        >>> LinkModel.from_json('A12345', '{"payload": "secret-payload"}').payload
        'secret-payload'
    """

    code: str
    payload: str
    expires_at: Optional[int] = None

    def to_json(self) -> str:
        """Serialize the stored part of the entry (the payload only)."""
        return json.dumps({'payload': self.payload})

    @classmethod
    def from_json(cls, code: str, raw: str, expires_at: Optional[int] = None) -> 'LinkModel':
        try:
            payload = json.loads(raw)['payload']
        except (json.JSONDecodeError, TypeError, KeyError) as e:
            raise MalformedRecordError(f"Link entry under code '{code}' is not a valid record.") from e
        return cls(code=code, payload=payload, expires_at=expires_at)
