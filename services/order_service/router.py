from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse

from shared.config import settings
from .schemas import OrderIn, OrderStatus, StatusUpdate
from .service import OrderService

router = APIRouter()

ENDPOINTS = [
    {"method": "GET", "path": "/health", "description": "Health check endpoint"},
    {"method": "GET", "path": "/orders", "description": "Get all orders"},
    {"method": "POST", "path": "/orders", "description": "Create a new order"},
    {"method": "GET", "path": "/orders/{orderId}", "description": "Get a specific order"},
    {"method": "PUT", "path": "/orders/{orderId}", "description": "Update an order"},
    {"method": "PATCH", "path": "/orders/{orderId}/status", "description": "Update order status"},
    {"method": "DELETE", "path": "/orders/{orderId}", "description": "Delete an order"},
    {"method": "GET", "path": "/orders/status/{status}", "description": "Filter orders by status"},
    {"method": "GET", "path": "/orders/customer/{email}", "description": "Search orders by customer email"},
    {"method": "POST", "path": "/orders/{orderId}/invoice", "description": "Generate invoice for an order"},
]


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


@router.get("/health")
async def health_check(service: OrderService = Depends(get_order_service)):
    return {
        "status": "healthy",
        "environment": settings.APP_ENV,
        "storage": service.store.name,
        "invoicesService": service.invoices.base_url,
        "notificationsService": service.notifications.base_url,
    }


@router.get("/", include_in_schema=False)
async def service_info(service: OrderService = Depends(get_order_service)):
    return {
        "message": "Orders microservice is running",
        "environment": settings.APP_ENV,
        "storage": service.store.name,
        "endpoints": ENDPOINTS,
    }


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(order: OrderIn, service: OrderService = Depends(get_order_service)):
    return await service.create_order(order)


@router.get("/orders")
@router.get("/orders/all")
async def list_orders(service: OrderService = Depends(get_order_service)):
    return await service.list_orders()


@router.get("/orders/status/{order_status}")
async def filter_by_status(order_status: OrderStatus, service: OrderService = Depends(get_order_service)):
    return await service.filter_by_status(order_status)


@router.get("/orders/customer/{email}")
async def filter_by_email(email: str, service: OrderService = Depends(get_order_service)):
    return await service.filter_by_email(email)


@router.get("/orders/{order_id}")
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return await service.get_order(order_id)


@router.put("/orders/{order_id}")
async def update_order(
    order_id: str,
    order: OrderIn,
    background_tasks: BackgroundTasks,
    service: OrderService = Depends(get_order_service),
):
    updated, status_changed = await service.update_order(order_id, order)
    if status_changed:
        background_tasks.add_task(service.notify_status_change, updated)
    return {"message": "Order updated successfully", "order": updated}


@router.patch("/orders/{order_id}/status")
async def update_status(
    order_id: str,
    payload: StatusUpdate,
    background_tasks: BackgroundTasks,
    service: OrderService = Depends(get_order_service),
):
    updated = await service.update_status(order_id, payload.status)
    # Fires once the response has been sent
    background_tasks.add_task(service.notify_status_change, updated)
    return {"message": "Order status updated successfully", "order": updated}


@router.delete("/orders/{order_id}")
async def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    deleted = await service.delete_order(order_id)
    return {"message": "Order deleted successfully", "order": deleted}


@router.post("/orders/{order_id}/invoice")
async def generate_invoice(order_id: str, service: OrderService = Depends(get_order_service)):
    result = await service.generate_invoice(order_id)
    if not result.ok:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to generate invoice", "error": result.error},
        )
    return {"message": "Invoice generated successfully", "invoice": result.value}
