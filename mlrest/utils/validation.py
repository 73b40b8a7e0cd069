"""
Utilities for validating user inputs such as metric names and parameter names.
"""

import numbers

from mlrest.exceptions import (
    MlrestException,
    TooManyItems,
    TooManyMetrics,
    TooManyParams,
    TooManyTags,
)

MAX_PARAMS_TAGS_PER_BATCH = 100
MAX_METRICS_PER_BATCH = 1000
MAX_ENTITIES_PER_BATCH = 1000


def _validate_batch_log_limits(metrics, params, tags):
    """
    Validate that the provided batched logging arguments are within the server limits.
    Each collection is checked on its own first, then the combined size; the first
    violated limit is the one reported.
    """
    if len(metrics) > MAX_METRICS_PER_BATCH:
        raise TooManyMetrics(len(metrics), MAX_METRICS_PER_BATCH)
    if len(params) > MAX_PARAMS_TAGS_PER_BATCH:
        raise TooManyParams(len(params), MAX_PARAMS_TAGS_PER_BATCH)
    if len(tags) > MAX_PARAMS_TAGS_PER_BATCH:
        raise TooManyTags(len(tags), MAX_PARAMS_TAGS_PER_BATCH)
    total_length = len(metrics) + len(params) + len(tags)
    if total_length > MAX_ENTITIES_PER_BATCH:
        raise TooManyItems(total_length, MAX_ENTITIES_PER_BATCH)


def _validate_metric_value(key, value):
    # bool is a subclass of int, but a boolean metric is almost certainly a mistake
    if not isinstance(value, numbers.Number) or isinstance(value, bool):
        raise MlrestException.invalid_parameter_value(
            f"Got invalid value {value!r} for metric '{key}'. Please specify value as a "
            "valid double (64-bit floating point)",
        )


def _validate_max_results(max_results):
    if not isinstance(max_results, int) or max_results <= 0:
        raise MlrestException.invalid_parameter_value(
            f"Invalid value for max_results. It must be a positive integer, got {max_results!r}"
        )
