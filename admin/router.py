import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from admin.dtab import Dtab
from admin.schemas import DtabResponse, MetricExpressionsResponse
from admin.services.dtab import DtabService
from admin.services.metric_expressions import MetricExpressionService
from admin.stats.registry import MetricSchemaSource, schema_source
from admin.stats.translator import ExpressionTranslator, translator

logger = logging.getLogger(__name__)
router = APIRouter(prefix='/admin')


def get_schema_source() -> MetricSchemaSource:
    return schema_source


def get_translator() -> ExpressionTranslator:
    return translator


def get_base_dtab() -> Dtab:
    return DtabService.base()


@router.get('/dtab', response_model=DtabResponse)
async def get_dtab(dtab: Annotated[Dtab, Depends(get_base_dtab)]) -> DtabResponse:
    return DtabService.get_dtab(dtab)


@router.get('/metric/expressions.json', response_model=MetricExpressionsResponse)
async def get_metric_expressions(
    source: Annotated[MetricSchemaSource, Depends(get_schema_source)],
    expression_translator: Annotated[ExpressionTranslator, Depends(get_translator)],
    latching_style: Annotated[list[str], Query(default_factory=list)],
    name: Annotated[list[str], Query(default_factory=list)],
    namespace: Annotated[
        list[str], Query(default_factory=list, example='path:to:namespace')
    ],
) -> MetricExpressionsResponse:
    try:
        return MetricExpressionService.get_expressions(
            source,
            expression_translator,
            latching_style=latching_style,
            names=name,
            namespaces=namespace,
        )
    except Exception as e:
        logger.exception(
            'Error in /metric/expressions.json',
            extra={'name': name, 'namespace': namespace},
        )
        raise HTTPException(status_code=500, detail='Failed to render expressions') from e
