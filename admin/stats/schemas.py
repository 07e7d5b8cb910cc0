from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Literal, TypeAlias


class MetricType(str, Enum):
    COUNTER = 'counter'
    GAUGE = 'gauge'
    HISTOGRAM = 'histogram'


def _segments(field_name: str, value: Sequence[str]) -> tuple[str, ...]:
    # a bare string would otherwise split into one segment per character
    if isinstance(value, str):
        raise TypeError(
            f'{field_name} must be a sequence of segments, not a string: {value!r}'
        )
    return tuple(value)


class HistogramComponent(str, Enum):
    MIN = 'min'
    MAX = 'max'
    AVG = 'avg'
    SUM = 'sum'
    COUNT = 'count'


class SourceRole(str, Enum):
    NO_ROLE_SPECIFIED = 'NoRoleSpecified'
    CLIENT = 'Client'
    SERVER = 'Server'


@dataclass(frozen=True)
class MetricBuilder:
    """Identity of a base metric: its scoped name and declared kind."""

    name: tuple[str, ...]
    metric_type: MetricType
    description: str = 'No description provided'
    units: str = 'Unspecified'

    def __post_init__(self) -> None:
        object.__setattr__(self, 'name', _segments('name', self.name))


class _ExpressionOps:
    def plus(self, other: 'Expression') -> 'FunctionExpression':
        return FunctionExpression('plus', (self, other))  # type: ignore[arg-type]

    def minus(self, other: 'Expression') -> 'FunctionExpression':
        return FunctionExpression('minus', (self, other))  # type: ignore[arg-type]

    def multiply(self, other: 'Expression') -> 'FunctionExpression':
        return FunctionExpression('multiply', (self, other))  # type: ignore[arg-type]

    def divide(self, other: 'Expression') -> 'FunctionExpression':
        return FunctionExpression('divide', (self, other))  # type: ignore[arg-type]


@dataclass(frozen=True)
class MetricExpression(_ExpressionOps):
    metric: MetricBuilder


@dataclass(frozen=True)
class HistogramExpression(_ExpressionOps):
    metric: MetricBuilder
    component: HistogramComponent | float

    def __post_init__(self) -> None:
        if isinstance(self.component, HistogramComponent):
            return
        if isinstance(self.component, bool) or not 0.0 <= self.component < 1.0:
            raise ValueError(f'Percentile must be in [0, 1), got {self.component!r}')


@dataclass(frozen=True)
class ConstantExpression(_ExpressionOps):
    repr: str


@dataclass(frozen=True)
class FunctionExpression(_ExpressionOps):
    func_name: str
    exprs: tuple['Expression', ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'exprs', tuple(self.exprs))
        if not self.exprs:
            raise ValueError(f'Function {self.func_name!r} needs at least one argument')


@dataclass(frozen=True)
class NoExpression(_ExpressionOps):
    pass


NO_EXPRESSION = NoExpression()

Expression: TypeAlias = (
    MetricExpression
    | HistogramExpression
    | ConstantExpression
    | FunctionExpression
    | NoExpression
)


def constant(value: float) -> ConstantExpression:
    return ConstantExpression(str(float(value)))


def expression(
    value: float | MetricBuilder,
    component: HistogramComponent | float | None = None,
) -> Expression:
    if isinstance(value, MetricBuilder):
        if component is None:
            return MetricExpression(value)
        return HistogramExpression(value, component)
    return constant(value)


def function(func_name: str, *exprs: Expression) -> FunctionExpression:
    return FunctionExpression(func_name, exprs)


@dataclass(frozen=True)
class Unbounded:
    kind: Literal['unbounded'] = 'unbounded'


class Operator(str, Enum):
    GREATER_THAN = '>'
    LESS_THAN = '<'


@dataclass(frozen=True)
class MonotoneThresholds:
    operator: Operator
    bad_threshold: float
    good_threshold: float
    lower_bound_inclusive: float | None = None
    upper_bound_exclusive: float | None = None
    kind: Literal['monotone'] = 'monotone'

    def __post_init__(self) -> None:
        if self.operator is Operator.GREATER_THAN:
            valid = self.good_threshold >= self.bad_threshold
        else:
            valid = self.good_threshold <= self.bad_threshold
        if not valid:
            raise ValueError(
                f'Good threshold {self.good_threshold} is on the wrong side of '
                f'bad threshold {self.bad_threshold} for operator {self.operator.value!r}'
            )


Bounds: TypeAlias = Unbounded | MonotoneThresholds


@dataclass(frozen=True)
class ExpressionLabels:
    process_path: str = 'Unspecified'
    service_name: str = 'Unspecified'
    role: SourceRole = SourceRole.NO_ROLE_SPECIFIED


@dataclass(frozen=True)
class ExpressionSchemaKey:
    name: str
    labels: ExpressionLabels
    namespace: tuple[str, ...]


@dataclass(frozen=True)
class ExpressionSchema:
    name: str
    expr: Expression
    labels: ExpressionLabels = field(default_factory=ExpressionLabels)
    namespace: tuple[str, ...] = ()
    bounds: Bounds = field(default_factory=Unbounded)
    description: str = 'Unspecified'
    unit: str = 'Unspecified'
    expr_query: str = ''

    def __post_init__(self) -> None:
        object.__setattr__(self, 'namespace', _segments('namespace', self.namespace))

    def schema_key(self) -> ExpressionSchemaKey:
        return ExpressionSchemaKey(self.name, self.labels, self.namespace)

    def with_bounds(self, bounds: Bounds) -> 'ExpressionSchema':
        return replace(self, bounds=bounds)

    def with_namespace(self, *segments: str) -> 'ExpressionSchema':
        return replace(self, namespace=segments)

    def with_description(self, description: str) -> 'ExpressionSchema':
        return replace(self, description=description)

    def with_unit(self, unit: str) -> 'ExpressionSchema':
        return replace(self, unit=unit)

    def with_label(self, process_path: str) -> 'ExpressionSchema':
        return replace(self, labels=replace(self.labels, process_path=process_path))

    def with_service_name(self, service_name: str) -> 'ExpressionSchema':
        return replace(self, labels=replace(self.labels, service_name=service_name))

    def with_role(self, role: SourceRole) -> 'ExpressionSchema':
        return replace(self, labels=replace(self.labels, role=role))

    def with_expr_query(self, expr_query: str) -> 'ExpressionSchema':
        return replace(self, expr_query=expr_query)
