# storefront/routers/products.py
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Path, Query

from .. import schemas
from ..deps import T_CatalogService, T_Token
from ..models import MAX_ID

router = APIRouter(prefix='/api/products', tags=['products'])

T_ProductId = Annotated[int, Path(ge=1, le=MAX_ID)]


@router.get('', response_model=list[schemas.ProductPublic])
def read_products(
        catalog: T_CatalogService,
        skip: int = Query(0, ge=0, le=MAX_ID),
        limit: int | None = Query(None, ge=1, le=MAX_ID),
):
    return list(catalog.list(skip=skip, limit=limit))


@router.get('/{product_id}', response_model=schemas.ProductPublic)
def get_product_by_id(product_id: T_ProductId, catalog: T_CatalogService):
    return catalog.get(product_id)


@router.post(
    '', status_code=HTTPStatus.CREATED, response_model=schemas.ProductPublic
)
def create_product(
        product: schemas.ProductSchema, catalog: T_CatalogService, token: T_Token
):
    return catalog.create(token, product)


@router.put('/{product_id}', response_model=schemas.ProductPublic)
def update_product(
        product_id: T_ProductId,
        product: schemas.ProductUpdateSchema,
        catalog: T_CatalogService,
        token: T_Token,
):
    return catalog.update(token, product_id, product)


@router.delete('/{product_id}', response_model=schemas.DeleteResult)
def delete_product(product_id: T_ProductId, catalog: T_CatalogService, token: T_Token):
    return catalog.delete(token, product_id)
