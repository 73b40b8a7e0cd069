from mlrest.entities import Metric
from mlrest.protos.service import Metric as ProtoMetric
from mlrest.utils.time import get_current_time_millis

from tests.helper_functions import random_int, random_str


def _check(metric, key, value, timestamp, step):
    assert type(metric) == Metric
    assert metric.key == key
    assert metric.value == value
    assert metric.timestamp == timestamp
    assert metric.step == step


def test_creation_and_hydration():
    key = random_str()
    value = 10000
    ts = get_current_time_millis()
    step = random_int()

    metric = Metric(key, value, ts, step)
    _check(metric, key, value, ts, step)

    as_dict = {"key": key, "value": value, "timestamp": ts, "step": step}
    assert dict(metric) == as_dict

    proto = metric.to_proto()
    metric2 = Metric.from_proto(proto)
    _check(metric2, key, value, ts, step)

    metric3 = Metric.from_dictionary(as_dict)
    _check(metric3, key, value, ts, step)


def test_step_defaults_to_zero():
    assert Metric("loss", 0.5, 1).step == 0
    assert ProtoMetric.model_validate({"key": "loss", "value": 0.5, "timestamp": 1}).step == 0


def test_timestamps_decode_from_numbers_and_numeric_strings():
    from_number = ProtoMetric.model_validate({"key": "k", "value": 1, "timestamp": 1662004217511})
    from_string = ProtoMetric.model_validate(
        {"key": "k", "value": "1", "timestamp": "1662004217511", "step": "3"}
    )
    assert Metric.from_proto(from_number).timestamp == 1662004217511
    assert Metric.from_proto(from_string).timestamp == 1662004217511
    assert Metric.from_proto(from_string).step == 3
