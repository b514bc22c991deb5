"""
Product endpoints - thin controllers over ProductService.
Domain errors propagate to the application exception handler.
"""

from fastapi import APIRouter, Query, status

from donation_api.config import get_settings
from donation_api.core.dependencies import CurrentUserId, ProductServiceDep
from donation_api.schemas.product import MessageResponse, ProductCreate, ProductResponse, ProductUpdate

router = APIRouter()
settings = get_settings()


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(svc: ProductServiceDep, data: ProductCreate, user_id: CurrentUserId):
    """List a new donation owned by the caller."""
    return await svc.create(
        user_id,
        data.name,
        data.description,
        data.state,
        data.purchased_at,
        [image.filename for image in data.images],
    )


@router.get("", response_model=list[ProductResponse])
async def list_products(
    svc: ProductServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """GET /products?page=1&limit=10, newest first."""
    return await svc.list_products(page=page, page_size=limit)


# Declared before /{product_id} so the literal paths win
@router.get("/mine", response_model=list[ProductResponse])
async def list_my_products(svc: ProductServiceDep, user_id: CurrentUserId):
    return await svc.list_by_owner(user_id)


@router.get("/received", response_model=list[ProductResponse])
async def list_received_products(svc: ProductServiceDep, user_id: CurrentUserId):
    """Products scheduled to the caller. An empty list is a valid answer."""
    return await svc.list_by_receiver(user_id)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(svc: ProductServiceDep, product_id: str):
    return await svc.get_by_id(product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(svc: ProductServiceDep, product_id: str, data: ProductUpdate, user_id: CurrentUserId):
    return await svc.update(product_id, data)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(svc: ProductServiceDep, product_id: str, user_id: CurrentUserId):
    await svc.delete(product_id)


@router.patch("/{product_id}/schedule", response_model=MessageResponse)
async def schedule_pickup(svc: ProductServiceDep, product_id: str, user_id: CurrentUserId):
    return MessageResponse(message=await svc.schedule(product_id, user_id))


@router.patch("/{product_id}/conclude", response_model=MessageResponse)
async def conclude_donation(svc: ProductServiceDep, product_id: str, user_id: CurrentUserId):
    return MessageResponse(message=await svc.conclude_donation(product_id, user_id))
