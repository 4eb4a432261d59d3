from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


# --- Auth / User ---

class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    nickname: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=8, max_length=72)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(max_length=72)


class UserUpdate(BaseModel):
    nickname: str | None = Field(None, min_length=1, max_length=50)
    image: str | None = Field(None, max_length=500)


class PasswordUpdate(BaseModel):
    current_password: str = Field(max_length=72)
    new_password: str = Field(min_length=8, max_length=72)


class UserResponse(BaseModel):
    id: int
    email: str
    nickname: str
    image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


# --- Comment ---

class CommentCreate(BaseModel):
    content: str = Field(min_length=1)


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1)


class CommentResponse(BaseModel):
    id: int
    content: str
    user_id: int
    article_id: int | None = None
    product_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class CommentPage(BaseModel):
    items: list[CommentResponse]
    next_cursor: int | None


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    image: str | None = Field(None, max_length=500)


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    image: str | None = Field(None, max_length=500)


class ArticleResponse(BaseModel):
    id: int
    title: str
    content: str
    image: str | None = None
    user_id: int
    created_at: datetime
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class ArticleDetail(ArticleResponse):
    like_count: int = 0
    is_liked: bool = False


# --- Product ---

class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    price: int = Field(ge=0)
    tags: list[str] = []
    images: list[str] = []


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1)
    price: int | None = Field(None, ge=0)
    tags: list[str] | None = None
    images: list[str] | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: int
    tags: list[str] = []
    images: list[str] = []
    user_id: int
    created_at: datetime
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class ProductDetail(ProductResponse):
    like_count: int = 0
    is_liked: bool = False


class ProductList(BaseModel):
    items: list[ProductResponse]


# --- Likes ---

class LikeState(BaseModel):
    is_liked: bool


# --- Pagination ---

class PaginatedResponse(BaseModel):
    items: list  # Will be typed in router
    total: int
    page: int
    page_size: int
    pages: int
