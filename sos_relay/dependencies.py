"""FastAPI dependencies resolving the services built in the app lifespan."""
from fastapi import Request

from sos_relay.pipelines.intake import IntakeService
from sos_relay.services.object_storage import ObjectStorage


def get_intake(request: Request) -> IntakeService:
    return request.app.state.intake


def get_object_storage(request: Request) -> ObjectStorage:
    return request.app.state.intake.storage
