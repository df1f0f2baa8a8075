from fastapi import APIRouter, HTTPException, Depends
from typing import List
from schemas.service import ServiceCreate, Service
from crud.service_crud import ServiceStore
from routes.dependencies import get_service_store, require_staff

router = APIRouter(tags=["services"])


@router.post("/", response_model=Service, dependencies=[Depends(require_staff)])
async def create_service(service: ServiceCreate, services: ServiceStore = Depends(get_service_store)):
    return await services.create(service)


@router.get("/", response_model=List[Service])
async def get_active_services(services: ServiceStore = Depends(get_service_store)):
    return await services.list_active()


@router.get("/{service_id}", response_model=Service)
async def get_service(service_id: str, services: ServiceStore = Depends(get_service_store)):
    service = await services.get(service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service
