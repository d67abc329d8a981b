# controller/detection_controller.py
from fastapi import APIRouter, Depends, status
from controller.controller_dependencies import get_detection_service, rate_limiter
from model.api import DetectRequest, DetectResponse
from service.detection_service import DetectionService
from util.constants import InternalURIs

detection_router = APIRouter(dependencies=[Depends(rate_limiter)])


@detection_router.post(
    InternalURIs.DETECT,
    response_model=DetectResponse,
    status_code=status.HTTP_200_OK,
)
async def detect(
    payload: DetectRequest,
    service: DetectionService = Depends(get_detection_service),
) -> DetectResponse:
    return await service.detect(payload.text, payload.source_tag)
