from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)

EXPRESSIONS_PROTOCOL_VERSION = 1.1


class DtabResponse(BaseModel):
    dtab: list[str]


class LabelsModel(BaseModel):
    process_path: str
    service_name: str
    role: str


class UnboundedModel(BaseModel):
    kind: Literal['unbounded'] = 'unbounded'


class MonotoneThresholdsModel(BaseModel):
    kind: Literal['monotone'] = 'monotone'
    operator: str
    bad_threshold: float
    good_threshold: float
    lower_bound_inclusive: float | None = None
    upper_bound_exclusive: float | None = None


class ExpressionModel(BaseModel):
    name: str
    labels: LabelsModel
    namespaces: list[str] | None = None
    expression: str
    bounds: UnboundedModel | MonotoneThresholdsModel = Field(
        discriminator='kind'
    )
    description: str
    unit: str

    @model_serializer(mode='wrap')
    def _drop_empty_namespaces(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        if not data.get('namespaces'):
            data.pop('namespaces', None)
        return data


class MetricExpressionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: float = Field(EXPRESSIONS_PROTOCOL_VERSION, alias='@version')
    counters_latched: bool
    separator_char: str
    expressions: list[ExpressionModel]
