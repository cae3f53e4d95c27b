from pydantic import BaseModel, Field
from typing import List

class Service(BaseModel):
    """Schema for a dental service offered by the clinic"""
    id: str = Field(..., description="Unique identifier for the service")
    name: str = Field(..., description="Display name of the service")
    description: str = Field(..., description="Short description shown to patients")
    price: int = Field(..., gt=0, description="Price in INR")

class ServiceCatalogResponse(BaseModel):
    services: List[Service]
    count: int

DENTAL_SERVICES: List[Service] = [
    Service(
        id="consultation",
        name="General Consultation",
        description="Comprehensive oral examination and treatment planning.",
        price=500,
    ),
    Service(
        id="cleaning",
        name="Teeth Cleaning",
        description="Professional scaling and polishing.",
        price=1500,
    ),
    Service(
        id="filling",
        name="Tooth Filling",
        description="Tooth-coloured composite restoration.",
        price=2000,
    ),
    Service(
        id="root-canal",
        name="Root Canal Treatment",
        description="Single-tooth endodontic treatment.",
        price=6000,
    ),
    Service(
        id="whitening",
        name="Teeth Whitening",
        description="In-clinic whitening session.",
        price=8000,
    ),
    Service(
        id="braces",
        name="Orthodontic Braces",
        description="Initial installment for metal or ceramic braces.",
        price=25000,
    ),
]

def get_service(service_id: str):
    """Return the catalog entry for service_id, or None"""
    return next((s for s in DENTAL_SERVICES if s.id == service_id), None)
