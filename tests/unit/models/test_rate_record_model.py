import json

import pytest

from timedshortener.dao.exceptions import MalformedRecordError
from timedshortener.models import RateRecordModel


def test_incremented_keeps_window():
    record = RateRecordModel(count=3, expires=1791892860000)
    assert record.incremented() == RateRecordModel(count=4, expires=1791892860000)
    assert record.count == 3


def test_json_round_trip_shape():
    record = RateRecordModel(count=1, expires=1791892860000)
    assert json.loads(record.to_json()) == {'count': 1, 'expires': 1791892860000}
    assert RateRecordModel.from_dict(json.loads(record.to_json())) == record


def test_from_dict_coerces_numeric_strings():
    assert RateRecordModel.from_dict({'count': '2', 'expires': '1791892860000'}) == RateRecordModel(count=2, expires=1791892860000)


@pytest.mark.parametrize('data', [{}, {'count': 1}, {'expires': 1}, {'count': 'x', 'expires': 1}, [1, 2], 'text'])
def test_from_dict_rejects_malformed_records(data):
    with pytest.raises(MalformedRecordError):
        RateRecordModel.from_dict(data)
