# routes.py
from fastapi import FastAPI
from controller.adapt_controller import adapt_router
from controller.detection_controller import detection_router
from controller.document_controller import document_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(detection_router)
    app.include_router(document_router)
    app.include_router(adapt_router)
