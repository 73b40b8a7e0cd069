import uuid

import pytest

from mlrest.entities import (
    LifecycleStage,
    Metric,
    Param,
    RunData,
    RunInfo,
    RunStatus,
    RunTag,
)
from mlrest.utils.time import get_current_time_millis

from tests.helper_functions import random_int, random_str


@pytest.fixture
def run_data():
    metrics = [
        Metric(
            key=random_str(10),
            value=float(random_int(0, 1000)),
            timestamp=get_current_time_millis() + random_int(-10**4, 10**4),
            step=random_int(),
        )
    ]
    params = [Param(random_str(10), random_str(random_int(10, 35))) for _ in range(10)]
    tags = [RunTag(random_str(10), random_str(random_int(10, 35))) for _ in range(10)]

    rd = RunData(metrics=metrics, params=params, tags=tags)

    return rd, metrics, params, tags


@pytest.fixture
def run_info():
    run_id = uuid.uuid4().hex
    experiment_id = str(random_int(10, 2000))
    start_time = get_current_time_millis()
    end_time = start_time + random_int(1, 10**4)
    ri = RunInfo(
        run_id=run_id,
        experiment_id=experiment_id,
        status=RunStatus.FINISHED,
        start_time=start_time,
        end_time=end_time,
        lifecycle_stage=LifecycleStage.ACTIVE,
        artifact_uri=random_str(20),
        run_name=random_str(10),
    )
    return ri, run_id, experiment_id, start_time, end_time
