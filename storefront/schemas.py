# storefront/schemas.py
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    model_validator,
)

ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
# strict: JSON numbers only, no booleans or numeric strings
Price = Annotated[float, Field(ge=0, allow_inf_nan=False, strict=True)]


# --- Users / auth ---

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)
    name: str | None = Field(None, max_length=255)


class LoginSchema(BaseModel):
    email: str
    password: str


class UserPublic(BaseModel):
    id: int
    email: str
    name: str | None
    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    token: str
    token_type: str = 'bearer'


class OAuth2Token(BaseModel):
    access_token: str
    token_type: str = 'bearer'


class Registration(Token):
    user: UserPublic


class LogoutResult(BaseModel):
    revoked: bool


# --- Products ---

class ProductSchema(BaseModel):
    name: ProductName
    price: Price
    description: str | None = None


class ProductUpdateSchema(BaseModel):
    name: ProductName | None = None
    price: Price | None = None
    description: str | None = None

    @model_validator(mode='after')
    def required_fields_not_null(self):
        for field in ('name', 'price'):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'{field} may not be null')
        return self


class ProductPublic(BaseModel):
    id: int
    name: str
    price: float
    description: str | None
    owner_id: int
    model_config = ConfigDict(from_attributes=True)


class DeleteResult(BaseModel):
    ok: bool = True
    id: int
