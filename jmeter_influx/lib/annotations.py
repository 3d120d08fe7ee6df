"""Start and end of test annotations.

Annotations go to their own measurement so dashboards can overlay them
without mixing them into the sample series:

    events,application=shop,title=ApacheJMeter,env=prod text="Checkout started"
"""

from __future__ import annotations

from jmeter_influx.lib.config import RunConfiguration
from jmeter_influx.lib.encoding import encode_field_value
from jmeter_influx.lib.models import ANNOTATION_MEASUREMENT, EncodedMetric

__all__ = ["build_annotation", "ANNOTATION_TITLE"]

ANNOTATION_TITLE = "ApacheJMeter"


def build_annotation(config: RunConfiguration, is_start: bool) -> EncodedMetric:
    """Build the annotation point for the start or end of a run.

    Args:
        config: Run configuration
        is_start: True for the start annotation, False for the end one

    Returns:
        EncodedMetric in the annotation measurement
    """
    tags = f",application={config.application_name},title={ANNOTATION_TITLE}{config.user_tag_string}"
    if config.event_tags:
        tags = f"{tags},tags={config.event_tags}"

    suffix = " started" if is_start else " ended"
    text = encode_field_value(config.test_title + suffix)
    return EncodedMetric(ANNOTATION_MEASUREMENT, tags, f'text="{text}"')
