from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

PostType = Literal["photo", "video"]
GearType = Literal["camera", "lens", "accessory"]
ContactStatus = Literal["new", "read", "replied"]


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class VerifyResponse(BaseModel):
    valid: bool
    user: dict[str, Any]


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: str
    category: str
    story: str
    location: str
    date: date
    time: str | None
    camera: str | None
    lens: str | None
    iso: str | None
    aperture: str | None
    shutter_speed: str | None
    media_url: str | None
    media_handle: str | None
    tags: list[str]
    views: int
    likes: int
    featured: bool
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total_pages: int
    current_page: int
    total: int


class PostMutationResponse(BaseModel):
    message: str
    post: PostResponse


class LikeResponse(BaseModel):
    likes: int


class GearResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    brand: str | None
    model: str | None
    description: str | None
    media_url: str | None
    media_handle: str | None
    specs: dict[str, str]
    purchase_date: date | None
    in_use: bool
    created_at: datetime
    updated_at: datetime


class GearMutationResponse(BaseModel):
    message: str
    gear: GearResponse


class ContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    subject: str | None = None
    message: str = Field(min_length=1)
    phone: str | None = None
    project_type: str | None = None


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    subject: str | None
    message: str
    phone: str | None
    project_type: str | None
    status: str
    created_at: datetime


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class MessageResponse(BaseModel):
    message: str


class CategoryCount(BaseModel):
    category: str
    count: int


class StatsResponse(BaseModel):
    total_posts: int
    total_views: int
    total_likes: int
    total_messages: int
    unread_messages: int
    posts_by_category: list[CategoryCount]
    recent_posts: list[PostResponse]
    top_posts: list[PostResponse]


class UploadResponse(BaseModel):
    message: str
    url: str
    handle: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    storage_backend: str
