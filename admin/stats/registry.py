from collections.abc import Mapping, Sequence
import logging
from typing import Protocol

from admin.stats.schemas import ExpressionSchema, ExpressionSchemaKey

logger = logging.getLogger(__name__)


class SchemaRegistry(Protocol):
    @property
    def has_latched_counters(self) -> bool: ...

    def expressions(self) -> Mapping[ExpressionSchemaKey, ExpressionSchema]: ...


class InMemorySchemaRegistry:
    def __init__(self, has_latched_counters: bool = False) -> None:
        self._has_latched_counters = has_latched_counters
        self._expressions: dict[ExpressionSchemaKey, ExpressionSchema] = {}

    @property
    def has_latched_counters(self) -> bool:
        return self._has_latched_counters

    def register(self, schema: ExpressionSchema) -> bool:
        key = schema.schema_key()
        if key in self._expressions:
            logger.warning(
                'Expression already registered, keeping the first one',
                extra={'expression': schema.name, 'namespace': list(schema.namespace)},
            )
            return False
        self._expressions[key] = schema
        logger.debug('Expression registered', extra={'expression': schema.name})
        return True

    def expressions(self) -> Mapping[ExpressionSchemaKey, ExpressionSchema]:
        return dict(self._expressions)


class MetricSchemaSource:
    def __init__(self, registries: Sequence[SchemaRegistry] = ()) -> None:
        self._registries = tuple(registries)

    @property
    def has_latched_counters(self) -> bool:
        return bool(self._registries) and all(
            registry.has_latched_counters for registry in self._registries
        )

    def expression_list(self) -> list[ExpressionSchema]:
        return [
            schema
            for registry in self._registries
            for schema in registry.expressions().values()
        ]


default_registry = InMemorySchemaRegistry()
schema_source = MetricSchemaSource([default_registry])
