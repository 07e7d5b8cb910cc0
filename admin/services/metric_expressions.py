from collections.abc import Collection, Iterable, Sequence
import logging

from admin.schemas import (
    ExpressionModel,
    LabelsModel,
    MetricExpressionsResponse,
    MonotoneThresholdsModel,
    UnboundedModel,
)
from admin.stats.registry import MetricSchemaSource
from admin.stats.schemas import Bounds, ExpressionSchema, MonotoneThresholds
from admin.stats.translator import ExpressionTranslator

logger = logging.getLogger(__name__)

TRUTHY_VALUES = frozenset({'true', '1'})
NAMESPACE_SEPARATOR = ':'


class MetricExpressionService:
    @staticmethod
    def should_rate(latching_style: Iterable[str], counters_latched: bool) -> bool:
        requested = any(value in TRUTHY_VALUES for value in latching_style)
        return requested and not counters_latched

    @staticmethod
    def filter_schemas(
        schemas: Sequence[ExpressionSchema],
        names: Collection[str],
        namespaces: Collection[str],
    ) -> list[ExpressionSchema]:
        return [
            schema
            for schema in schemas
            if (
                not namespaces
                or NAMESPACE_SEPARATOR.join(schema.namespace) in namespaces
            )
            and (not names or schema.name in names)
        ]

    @staticmethod
    def _bounds_model(bounds: Bounds) -> UnboundedModel | MonotoneThresholdsModel:
        if isinstance(bounds, MonotoneThresholds):
            return MonotoneThresholdsModel(
                operator=bounds.operator.value,
                bad_threshold=bounds.bad_threshold,
                good_threshold=bounds.good_threshold,
                lower_bound_inclusive=bounds.lower_bound_inclusive,
                upper_bound_exclusive=bounds.upper_bound_exclusive,
            )
        return UnboundedModel()

    @classmethod
    def to_model(cls, schema: ExpressionSchema) -> ExpressionModel:
        return ExpressionModel(
            name=schema.name,
            labels=LabelsModel(
                process_path=schema.labels.process_path,
                service_name=schema.labels.service_name,
                role=schema.labels.role.value,
            ),
            namespaces=list(schema.namespace) or None,
            expression=schema.expr_query,
            bounds=cls._bounds_model(schema.bounds),
            description=schema.description,
            unit=schema.unit,
        )

    @classmethod
    def get_expressions(
        cls,
        source: MetricSchemaSource,
        translator: ExpressionTranslator,
        latching_style: Sequence[str],
        names: Sequence[str],
        namespaces: Sequence[str],
    ) -> MetricExpressionsResponse:
        counters_latched = source.has_latched_counters
        should_rate = cls.should_rate(latching_style, counters_latched)
        filtered = cls.filter_schemas(
            source.expression_list(), set(names), set(namespaces)
        )
        logger.debug(
            'Rendering metric expressions',
            extra={
                'count': len(filtered),
                'should_rate': should_rate,
                'names': list(names),
                'namespaces': list(namespaces),
            },
        )

        expressions = [
            cls.to_model(
                schema.with_expr_query(translator.translate(schema.expr, should_rate))
            )
            for schema in filtered
        ]
        return MetricExpressionsResponse(
            counters_latched=counters_latched,
            separator_char=translator.separator,
            expressions=expressions,
        )
