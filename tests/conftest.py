from collections.abc import Iterator

from fastapi.testclient import TestClient
import pytest

from admin.dtab import Dtab
from admin.main import app
from admin.router import get_base_dtab, get_schema_source, get_translator
from admin.stats.formatter import CommonsMetricsFormatter
from admin.stats.registry import InMemorySchemaRegistry, MetricSchemaSource
from admin.stats.schemas import (
    ExpressionSchema,
    MetricBuilder,
    MetricType,
    MonotoneThresholds,
    Operator,
    expression,
)
from admin.stats.translator import ExpressionTranslator

SUCCESS = MetricBuilder(name=('success',), metric_type=MetricType.COUNTER)
FAILURES = MetricBuilder(name=('failures',), metric_type=MetricType.COUNTER)
LATENCY = MetricBuilder(name=('latency',), metric_type=MetricType.HISTOGRAM)

SUCCESS_RATE = ExpressionSchema(
    'success_rate',
    expression(100).multiply(
        expression(SUCCESS).divide(expression(SUCCESS).plus(expression(FAILURES)))
    ),
).with_bounds(MonotoneThresholds(Operator.GREATER_THAN, 99.5, 99.97))

THROUGHPUT = ExpressionSchema(
    'throughput', expression(SUCCESS).plus(expression(FAILURES))
).with_namespace('path', 'to', 'tenantName')

LATENCY_P99 = ExpressionSchema('latency_p99', expression(LATENCY, 0.99)).with_namespace(
    'tenantName'
)


def build_source(has_latched_counters: bool) -> MetricSchemaSource:
    registry = InMemorySchemaRegistry(has_latched_counters=has_latched_counters)
    for schema in (SUCCESS_RATE, THROUGHPUT, LATENCY_P99):
        registry.register(schema)
    return MetricSchemaSource([registry])


@pytest.fixture
def translator() -> ExpressionTranslator:
    return ExpressionTranslator(CommonsMetricsFormatter(), '/')


def _client(source: MetricSchemaSource, dtab: Dtab) -> Iterator[TestClient]:
    app.dependency_overrides[get_schema_source] = lambda: source
    app.dependency_overrides[get_translator] = lambda: ExpressionTranslator(
        CommonsMetricsFormatter(), '/'
    )
    app.dependency_overrides[get_base_dtab] = lambda: dtab
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def base_dtab() -> Dtab:
    return Dtab.read(
        '/srv=>/srv#/production;/srv=>/srv#/prod;/s=>/srv/local;/$/inet=>/$/nil;/zk=>/$/nil'
    )


@pytest.fixture
def client(base_dtab: Dtab) -> Iterator[TestClient]:
    yield from _client(build_source(has_latched_counters=False), base_dtab)


@pytest.fixture
def latched_client(base_dtab: Dtab) -> Iterator[TestClient]:
    yield from _client(build_source(has_latched_counters=True), base_dtab)
