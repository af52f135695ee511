"""
app/api/vehicles.py

Purpose: Vehicle endpoints (owner-scoped)
"""

from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id, get_ledger_service
from app.schemas.response import ApiResponse
from app.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from app.services.ledger_service import LedgerService
from utils.constants import MSG_VEHICLE_ADDED, MSG_VEHICLE_DELETED, MSG_VEHICLE_UPDATED

router = APIRouter(prefix="/vehicles")


@router.get("", response_model=ApiResponse[List[VehicleOut]])
async def list_vehicles(
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return ApiResponse(data=await service.list_vehicles(user_id))


@router.post("", response_model=ApiResponse[VehicleOut])
async def add_vehicle(
    payload: VehicleCreate,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    vehicle = await service.add_vehicle(user_id, payload)
    return ApiResponse(message=MSG_VEHICLE_ADDED, data=vehicle)


@router.get("/{vehicle_id}", response_model=ApiResponse[VehicleOut])
async def get_vehicle(
    vehicle_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return ApiResponse(data=await service.get_vehicle(user_id, vehicle_id))


@router.put("/{vehicle_id}", response_model=ApiResponse[VehicleOut])
async def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    vehicle = await service.update_vehicle(user_id, vehicle_id, payload)
    return ApiResponse(message=MSG_VEHICLE_UPDATED, data=vehicle)


@router.delete("/{vehicle_id}", response_model=ApiResponse[None])
async def delete_vehicle(
    vehicle_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    await service.delete_vehicle(user_id, vehicle_id)
    return ApiResponse(message=MSG_VEHICLE_DELETED)
