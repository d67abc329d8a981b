# controller/adapt_controller.py
from fastapi import APIRouter, Depends
from controller.controller_dependencies import get_adapt_service, rate_limiter
from model.api import AdaptRequest, AdaptResponse
from service.adapt_service import AdaptService
from util.constants import InternalURIs

adapt_router = APIRouter(dependencies=[Depends(rate_limiter)])


@adapt_router.post(
    InternalURIs.ADAPT, response_model=AdaptResponse, response_model_exclude_none=True
)
async def adapt(
    payload: AdaptRequest,
    service: AdaptService = Depends(get_adapt_service),
) -> AdaptResponse:
    return await service.adapt(payload.text)
