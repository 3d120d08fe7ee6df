"""Sample result to line-protocol mapping.

Each result becomes at most one point in the data measurement:

    jmeter,application=shop,transaction=login,responseCode=200 meanAT=4 responseTime=150

Tags are written in a fixed order (application, transaction, responseCode,
then user tags) so the output is reproducible.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from jmeter_influx.lib.aggregate import UserMetric
from jmeter_influx.lib.config import RunConfiguration
from jmeter_influx.lib.encoding import encode_tag_value
from jmeter_influx.lib.models import EncodedMetric, SampleResult

__all__ = ["map_result", "map_results"]

TAG_APPLICATION = ",application="
TAG_TRANSACTION = ",transaction="
TAG_RESPONSE_CODE = ",responseCode="
METRIC_MEAN_ACTIVE_THREADS = "meanAT="
METRIC_RESPONSE_TIME = "responseTime="


def map_result(
    result: SampleResult,
    aggregate: UserMetric,
    config: RunConfiguration,
) -> Optional[EncodedMetric]:
    """Record a result and encode it when its label passes the filter.

    The aggregate is updated for every result, including filtered ones, so
    active thread statistics describe all traffic.

    Args:
        result: Sample result from the load-testing engine
        aggregate: Run-level active thread statistics
        config: Run configuration

    Returns:
        EncodedMetric for the data measurement, or None if filtered out
    """
    aggregate.add(result)
    if not config.sample_filter.matches(result.label):
        return None

    tags = "".join(
        (
            TAG_APPLICATION,
            config.application_name,
            TAG_TRANSACTION,
            encode_tag_value(result.label),
            TAG_RESPONSE_CODE,
            encode_tag_value(result.response_code),
            config.user_tag_string,
        )
    )
    fields = (
        f"{METRIC_MEAN_ACTIVE_THREADS}{aggregate.mean_active_threads} "
        f"{METRIC_RESPONSE_TIME}{int(result.elapsed or 0)}"
    )
    return EncodedMetric(config.measurement_name, tags, fields)


def map_results(
    results: Iterable[SampleResult],
    aggregate: UserMetric,
    config: RunConfiguration,
) -> List[EncodedMetric]:
    """Map a batch of results, keeping only the exported ones in order."""
    metrics: List[EncodedMetric] = []
    for result in results:
        metric = map_result(result, aggregate, config)
        if metric is not None:
            metrics.append(metric)
    return metrics
