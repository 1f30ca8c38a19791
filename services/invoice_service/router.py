from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse, JSONResponse

from shared.config import settings
from shared.errors import OrderNotFound
from .schemas import InvoiceResult, OrderReplica
from .service import InvoiceService
from .storage import ArtifactStoreError, LocalArtifactStore

router = APIRouter()


def get_invoice_service(request: Request) -> InvoiceService:
    return request.app.state.invoice_service


@router.get("/health")
async def health_check(service: InvoiceService = Depends(get_invoice_service)):
    return {
        "status": "healthy",
        "service": "invoices",
        "environment": settings.APP_ENV,
        "storage": service.store.name,
        "artifacts": service.artifacts.name,
        "mailer": service.mailer.name,
    }


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def receive_order(order: OrderReplica, service: InvoiceService = Depends(get_invoice_service)):
    return await service.receive(order.model_dump())


@router.get("/orders")
async def list_orders(service: InvoiceService = Depends(get_invoice_service)):
    return await service.list_orders()


@router.get("/orders/search")
async def search_orders(name: str = "", service: InvoiceService = Depends(get_invoice_service)):
    return await service.search_orders(name)


@router.post("/invoices/generate/{order_id}", response_model=InvoiceResult, response_model_exclude_none=True)
async def generate_invoice(order_id: str, service: InvoiceService = Depends(get_invoice_service)):
    try:
        return await service.generate(order_id)
    except OrderNotFound:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "orderId": order_id, "error": "Order not found"},
        )
    except ArtifactStoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "orderId": order_id, "error": str(e), "errorType": "artifact_store"},
        )


@router.get("/invoices/files/{filename}", include_in_schema=False)
async def download_invoice(filename: str, service: InvoiceService = Depends(get_invoice_service)):
    if not isinstance(service.artifacts, LocalArtifactStore):
        raise HTTPException(status_code=404, detail="Invoices are served from the object store")
    path = service.artifacts.path_for(filename)
    if path is None or not path.is_file():
        raise HTTPException(status_code=404, detail="Invoice not found")
    return FileResponse(path, media_type="application/pdf", filename=filename)
