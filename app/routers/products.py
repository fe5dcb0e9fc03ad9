# =============================================================================
# app/routers/products.py - Product CRUD Endpoints
# =============================================================================
# Reads are public so the storefront can list products.
# Create, update and delete require an admin token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from app.auth import get_current_admin, AdminUser
from app.dependencies import ProductServiceDep
from core.models.product import (
    CATEGORY_TEMPLATES,
    CategoryTemplate,
    Product,
    ProductCreate,
    ProductList,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProductList, response_model_by_alias=True)
async def list_products(products: ProductServiceDep):
    """
    List all products, newest first.

    Each product's `images` are in display order; the first is the main image.
    """
    items = products.list_products()
    return ProductList(products=items, total=len(items))


@router.get("/categories", response_model=list[CategoryTemplate])
async def list_categories():
    """
    Categories with preset price and description.

    Picking one of these in the admin form overwrites price and description.
    """
    return list(CATEGORY_TEMPLATES.values())


@router.get("/{product_id}", response_model=Product, response_model_by_alias=True)
async def get_product(
    products: ProductServiceDep,
    product_id: str = Path(..., description="Product ID"),
):
    """
    Get a single product.

    **Errors:**
    - 404: Product not found
    """
    return products.get_product(product_id)


@router.post(
    "",
    response_model=Product,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    request: ProductCreate,
    products: ProductServiceDep,
    admin: AdminUser = Depends(get_current_admin),
):
    """
    Create a product.

    `images` must already be uploaded (see POST /uploads/images); the store
    only keeps their URLs.
    """
    product = products.create_product(request)
    logger.info(f"Admin {admin.id} created product {product.id}")
    return product


@router.put("/{product_id}", response_model=Product, response_model_by_alias=True)
async def update_product(
    request: ProductUpdate,
    products: ProductServiceDep,
    product_id: str = Path(..., description="Product ID"),
    admin: AdminUser = Depends(get_current_admin),
):
    """
    Replace every mutable field of a product, including its image list.

    **Errors:**
    - 404: Product not found
    """
    product = products.update_product(product_id, request)
    logger.info(f"Admin {admin.id} updated product {product_id}")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    products: ProductServiceDep,
    product_id: str = Path(..., description="Product ID"),
    admin: AdminUser = Depends(get_current_admin),
):
    """
    Permanently delete a product.

    **Errors:**
    - 404: Product not found
    """
    products.delete_product(product_id)
    logger.info(f"Admin {admin.id} deleted product {product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
