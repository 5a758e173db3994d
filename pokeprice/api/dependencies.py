from fastapi import Request

from pokeprice.services.data_service import DataService


def get_data_service(request: Request) -> DataService:
    """
    Dependency that provides the application's DataService.

    The service is built once in the app lifespan and shared by all
    requests, so single-flight and background refresh state is global.
    """
    service: DataService = request.app.state.data_service
    return service
