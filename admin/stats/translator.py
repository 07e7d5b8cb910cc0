from typing import assert_never

from admin.config import settings
from admin.stats.formatter import StatsFormatter, flatten_name, get_formatter
from admin.stats.schemas import (
    ConstantExpression,
    Expression,
    FunctionExpression,
    HistogramComponent,
    HistogramExpression,
    MetricBuilder,
    MetricExpression,
    MetricType,
    NoExpression,
)


class ExpressionTranslator:
    """Renders an expression tree as a one-line query, e.g.
    ``multiply(100.0,divide(rate(success),plus(rate(success),rate(failures))))``.

    Histogram components are named the way the metrics export names them
    (``request_latency.p9999``, ``request_latency.min``) so queries line up
    with the exported series.
    """

    def __init__(self, formatter: StatsFormatter, separator: str) -> None:
        self.formatter = formatter
        self.separator = separator

    def translate(self, expr: Expression, should_rate: bool) -> str:
        match expr:
            case HistogramExpression(metric=metric, component=component):
                return self._histogram(metric, component)
            case MetricExpression(metric=metric):
                return self._metric(metric, should_rate)
            case ConstantExpression(repr=literal):
                return literal
            case FunctionExpression(func_name=func_name, exprs=exprs):
                args = ','.join(self.translate(arg, should_rate) for arg in exprs)
                return f'{func_name}({args})'
            case NoExpression():
                return 'null'
            case _:
                assert_never(expr)

    def _histogram(
        self, metric: MetricBuilder, component: HistogramComponent | float
    ) -> str:
        name = flatten_name(metric.name, self.separator)
        match component:
            case HistogramComponent.MIN:
                label = self.formatter.label_min
            case HistogramComponent.MAX:
                label = self.formatter.label_max
            case HistogramComponent.AVG:
                label = self.formatter.label_average
            case HistogramComponent.SUM:
                label = self.formatter.label_sum
            case HistogramComponent.COUNT:
                label = self.formatter.label_count
            case _:
                label = self.formatter.label_percentile(component)
        return self.formatter.histo_name(name, label)

    def _metric(self, metric: MetricBuilder, should_rate: bool) -> str:
        name = flatten_name(metric.name, self.separator)
        if metric.metric_type is MetricType.COUNTER and should_rate:
            return f'rate({name})'
        return name


translator = ExpressionTranslator(
    formatter=get_formatter(settings.STATS_FORMAT),
    separator=settings.SCOPE_SEPARATOR,
)


def translate_to_query(
    expr: Expression,
    should_rate: bool,
    formatter: StatsFormatter | None = None,
    separator: str | None = None,
) -> str:
    if formatter is None and separator is None:
        return translator.translate(expr, should_rate)
    return ExpressionTranslator(
        formatter=translator.formatter if formatter is None else formatter,
        separator=translator.separator if separator is None else separator,
    ).translate(expr, should_rate)
