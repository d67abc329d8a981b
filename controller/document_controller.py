# controller/document_controller.py
from fastapi import APIRouter, Depends
from controller.controller_dependencies import get_document_service, rate_limiter
from model.api import ProcessDocumentRequest, ProcessDocumentResponse, SeedResponse
from service.document_service import DocumentService
from util.constants import InternalURIs

document_router = APIRouter(dependencies=[Depends(rate_limiter)])


@document_router.post(
    InternalURIs.PROCESS_DOCUMENT, response_model=ProcessDocumentResponse
)
async def process_document(
    payload: ProcessDocumentRequest,
    service: DocumentService = Depends(get_document_service),
) -> ProcessDocumentResponse:
    return await service.process_document(
        payload.content, payload.filename, payload.source_tag
    )


@document_router.post(
    InternalURIs.SEED, response_model=SeedResponse, response_model_exclude_none=True
)
async def seed(
    service: DocumentService = Depends(get_document_service),
) -> SeedResponse:
    return await service.seed()
