from collections.abc import Sequence
import logging
import math

logger = logging.getLogger(__name__)


class StatsFormatter:
    """Naming convention shared by every surface that exports histogram stats.

    Subclasses only pick the join between a histogram name and its component
    and the label text for percentiles and fixed aggregates.
    """

    label_min = 'min'
    label_max = 'max'
    label_average = 'avg'
    label_sum = 'sum'
    label_count = 'count'

    def histo_name(self, name: str, component: str) -> str:
        return f'{name}.{component}'

    def label_percentile(self, p: float) -> str:
        # rounds half up; 0.999 renders as p9990
        label = f'p{math.floor(p * 10000 + 0.5)}'
        if len(label) > 3 and label[3:] == '00':
            return label[:3]
        return label


class CommonsMetricsFormatter(StatsFormatter):
    pass


class OstrichFormatter(StatsFormatter):
    label_min = 'minimum'
    label_max = 'maximum'
    label_average = 'average'


class CommonsStatsFormatter(StatsFormatter):
    def histo_name(self, name: str, component: str) -> str:
        return f'{name}_{component}'

    def label_percentile(self, p: float) -> str:
        return f'{p * 100:g}'.replace('.', '_') + 'percentile'


_FORMATTERS: dict[str, StatsFormatter] = {
    'commonsmetrics': CommonsMetricsFormatter(),
    'ostrich': OstrichFormatter(),
    'commonsstats': CommonsStatsFormatter(),
}

DEFAULT_FORMATTER = _FORMATTERS['commonsmetrics']


def get_formatter(name: str) -> StatsFormatter:
    formatter = _FORMATTERS.get(name.lower())
    if formatter is None:
        logger.warning(
            'Unknown stats format, falling back to default',
            extra={'stats_format': name},
        )
        return DEFAULT_FORMATTER
    return formatter


def flatten_name(segments: Sequence[str], separator: str) -> str:
    return separator.join(segments)
