from fastapi import APIRouter, HTTPException
import logging

from ..models.service_model import DENTAL_SERVICES, Service, ServiceCatalogResponse, get_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/services", response_model=ServiceCatalogResponse)
async def list_services():
    """
    List the dental services patients can pay for.

    Returns:
        The static catalog with each service's id, name, description and price
    """
    return ServiceCatalogResponse(services=DENTAL_SERVICES, count=len(DENTAL_SERVICES))

@router.get("/services/{service_id}", response_model=Service)
async def get_service_by_id(service_id: str):
    """
    Retrieve a single catalog entry.

    Args:
        service_id: Catalog identifier, e.g. "cleaning"

    Returns:
        Service: The service with its authoritative price
    """
    service = get_service(service_id)
    if not service:
        logger.warning(f"Unknown service requested: {service_id}")
        raise HTTPException(status_code=404, detail="Service not found")
    return service
