from fastapi import Request

from tirefleet.services.data_service import DataService
from tirefleet.services.import_service import ImportService
from tirefleet.sync.hub import SyncHub


def get_data_service(request: Request) -> DataService:
    """FastAPI dependency for the DataService created in the app lifespan."""
    return request.app.state.data


def get_import_service(request: Request) -> ImportService:
    return request.app.state.importer


def get_sync_hub(request: Request) -> SyncHub:
    return request.app.state.hub
