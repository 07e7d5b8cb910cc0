import logging

import pytest

from admin.stats.formatter import (
    DEFAULT_FORMATTER,
    CommonsMetricsFormatter,
    CommonsStatsFormatter,
    OstrichFormatter,
    flatten_name,
    get_formatter,
)


@pytest.mark.parametrize(
    ('percentile', 'label'),
    [
        (0.0, 'p0'),
        (0.5, 'p50'),
        (0.9, 'p90'),
        (0.95, 'p95'),
        (0.99, 'p99'),
        (0.999, 'p9990'),
        (0.9999, 'p9999'),
        (0.00025, 'p3'),
        (0.00045, 'p5'),
        (0.99985, 'p9999'),
    ],
)
def test_commons_metrics_percentile_labels(percentile: float, label: str) -> None:
    assert CommonsMetricsFormatter().label_percentile(percentile) == label


def test_get_formatter() -> None:
    assert isinstance(get_formatter('ostrich'), OstrichFormatter)
    assert isinstance(get_formatter('CommonsStats'), CommonsStatsFormatter)
    assert get_formatter('commonsmetrics') is DEFAULT_FORMATTER


def test_unknown_formatter_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger='admin.stats.formatter'):
        assert get_formatter('prometheus') is DEFAULT_FORMATTER
    assert 'Unknown stats format' in caplog.text


def test_histo_name_join() -> None:
    assert CommonsMetricsFormatter().histo_name('a/b', 'p99') == 'a/b.p99'
    assert CommonsStatsFormatter().histo_name('a/b', 'p99') == 'a/b_p99'


def test_flatten_name() -> None:
    assert flatten_name(('client', 'connections'), '/') == 'client/connections'
    assert flatten_name(('client',), '/') == 'client'
