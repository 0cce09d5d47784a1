# storefront/services/catalog_service.py
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..DB import atomic
from ..errors import InvalidInput, InvalidToken, NotFound, describe_validation_error
from ..models import MAX_ID, Product, User
from ..schemas import ProductSchema, ProductUpdateSchema
from ..settings import Settings
from .auth_service import AuthService

logger = logging.getLogger(__name__)


def _validated(schema: type[BaseModel], data: Mapping[str, Any] | BaseModel) -> BaseModel:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise InvalidInput(describe_validation_error(exc.errors()))


class CatalogService:
    """
    Product catalog.

    Reads are public. Every mutation takes the caller's bearer token and
    validates it through the Auth Service before touching the store.
    """

    def __init__(self, session: Session, auth: AuthService, settings: Settings):
        self.session = session
        self.auth = auth
        self.settings = settings

    def list(self, skip: int = 0, limit: int | None = None) -> Iterator[Product]:
        query = select(Product).order_by(Product.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        yield from self.session.scalars(query)

    def get(self, product_id: int) -> Product:
        # Ids outside the column range cannot exist
        if not 1 <= product_id <= MAX_ID:
            raise NotFound('Product not found')
        db_product = self.session.get(Product, product_id)
        if db_product is None:
            raise NotFound('Product not found')
        return db_product

    def create(self, token: str | None, data: Mapping[str, Any] | BaseModel) -> Product:
        user_id = self.auth.validate(token)
        product = _validated(ProductSchema, data)
        if self.session.get(User, user_id) is None:
            raise InvalidToken('user no longer exists')

        db_product = Product(
            owner_id=user_id,
            name=product.name,
            price=product.price,
            description=product.description,
        )
        with atomic(self.session):
            self.session.add(db_product)
        self.session.refresh(db_product)

        logger.info(f"Product {db_product.id} created by user {user_id}")
        return db_product

    def update(self, token: str | None, product_id: int, data: Mapping[str, Any] | BaseModel) -> Product:
        user_id = self.auth.validate(token)
        changes = _validated(ProductUpdateSchema, data).model_dump(exclude_unset=True)
        db_product = self._get_for_mutation(product_id, user_id)

        if not changes:
            return db_product

        with atomic(self.session):
            for key, value in changes.items():
                setattr(db_product, key, value)
        self.session.refresh(db_product)

        logger.info(f"Product {product_id} updated by user {user_id} ({', '.join(sorted(changes))})")
        return db_product

    def delete(self, token: str | None, product_id: int) -> dict:
        user_id = self.auth.validate(token)
        db_product = self._get_for_mutation(product_id, user_id)

        with atomic(self.session):
            self.session.delete(db_product)

        logger.info(f"Product {product_id} deleted by user {user_id}")
        return {'ok': True, 'id': product_id}

    def _get_for_mutation(self, product_id: int, user_id: int) -> Product:
        db_product = self.get(product_id)
        # Other users' products are invisible when mutations are owner-only
        if self.settings.OWNER_ONLY_MUTATIONS and db_product.owner_id != user_id:
            raise NotFound('Product not found')
        return db_product
