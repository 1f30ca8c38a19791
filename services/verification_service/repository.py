from typing import List
from .schemas import VerificationRecord

class VerificationRepository:
    """Append-only, process-local list of delivery verifications."""

    def __init__(self):
        self._records: List[VerificationRecord] = []

    async def add(self, record: VerificationRecord) -> VerificationRecord:
        self._records.append(record)
        return record

    async def list(self) -> List[VerificationRecord]:
        return list(self._records)

    async def for_order(self, order_id: str) -> List[VerificationRecord]:
        return [r for r in self._records if r.orderId == order_id]
