from fastapi import APIRouter, HTTPException, Depends
from typing import List
from schemas.barber import Barber, BarberCreate
from crud.barber_crud import BarberStore
from routes.dependencies import get_barber_store, require_staff

router = APIRouter(tags=["barbers"])


@router.post("/", response_model=Barber, dependencies=[Depends(require_staff)])
async def create_barber(barber: BarberCreate, barbers: BarberStore = Depends(get_barber_store)):
    return await barbers.create(barber)


@router.get("/", response_model=List[Barber])
async def get_active_barbers(barbers: BarberStore = Depends(get_barber_store)):
    return await barbers.list_active()


@router.get("/{barber_id}", response_model=Barber)
async def get_barber(barber_id: str, barbers: BarberStore = Depends(get_barber_store)):
    barber = await barbers.get(barber_id)
    if not barber:
        raise HTTPException(status_code=404, detail="Barber not found")
    return barber
