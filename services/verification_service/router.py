from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from .schemas import VerificationRecord
from .service import VerificationService

router = APIRouter()


def get_verification_service(request: Request) -> VerificationService:
    return request.app.state.verification_service


@router.get("/health")
async def health_check():
    return {"service": "verification", "status": "running"}


@router.post("/verify", status_code=status.HTTP_201_CREATED)
async def verify_delivery(
    orderId: str = Form(..., min_length=1),
    gpsLat: float = Form(..., ge=-90, le=90),
    gpsLong: float = Form(..., ge=-180, le=180),
    photo: Optional[UploadFile] = File(None),
    service: VerificationService = Depends(get_verification_service),
):
    record = await service.verify(orderId, gpsLat, gpsLong, photo)
    return {"message": "Delivery verified", "record": record}


@router.get("/verifications", response_model=List[VerificationRecord])
async def list_verifications(service: VerificationService = Depends(get_verification_service)):
    return await service.list_verifications()


@router.get("/verifications/{order_id}", response_model=List[VerificationRecord])
async def order_verifications(order_id: str, service: VerificationService = Depends(get_verification_service)):
    return await service.for_order(order_id)
