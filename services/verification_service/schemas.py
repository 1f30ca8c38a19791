from typing import Optional
from pydantic import BaseModel

class VerificationRecord(BaseModel):
    id: str
    orderId: str
    gpsLat: float
    gpsLong: float
    photo: Optional[str] = None
    timestamp: str
