"""
Entity schemas shared by both storage backends and the API.

Python attributes are snake_case; JSON bodies use camelCase aliases
(``isAdmin``, ``createdAt``, ``coverImage``...). Input accepts either.
"""

import re
from datetime import datetime, timezone
from typing import Annotated, ClassVar, List, Literal, Optional

from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, EmailStr, Field, StringConstraints,
    field_validator, model_validator,
)
from pydantic.alias_generators import to_camel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def slugify(title: str) -> str:
    """'Getting Started with Python!' -> 'getting-started-with-python'"""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _split_list(value):
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def _join_list(value):
    if isinstance(value, list):
        return ",".join(str(item).strip() for item in value if str(item).strip())
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_aware)]
# Blog tags are stored as one comma separated string; a JSON list is accepted too
Tags = Annotated[Optional[Annotated[str, StringConstraints(max_length=500)]], BeforeValidator(_join_list)]
Technologies = Annotated[List[str], BeforeValidator(_split_list)]


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PartialModel(ApiModel):
    """Update body: only fields the client sent are applied.

    Fields listed in ``not_nullable`` may be omitted but not sent as null.
    """

    not_nullable: ClassVar[tuple] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# --- Users / auth ---

class UserCreate(ApiModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    is_admin: bool = False


class User(ApiModel):
    id: int
    username: str
    password_hash: str
    is_admin: bool = False
    created_at: UtcDatetime


class SessionUser(ApiModel):
    """What a credential proves: never carries the password hash."""
    id: int
    username: str
    is_admin: bool = False


class LoginRequest(ApiModel):
    # no length rules beyond non-empty: a short password is just a wrong one
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    success: bool
    user: SessionUser


class SessionResponse(ApiModel):
    authenticated: bool
    user: Optional[SessionUser] = None


class ActionResult(ApiModel):
    success: bool
    message: str


# --- Contact messages ---

class MessageCreate(ApiModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=10)

    class Config:
        str_strip_whitespace = True

    # subject becomes an email header; both are shown as single lines
    @field_validator("name", "subject")
    @classmethod
    def single_line(cls, value: str) -> str:
        if "\r" in value or "\n" in value:
            raise ValueError("must not contain line breaks")
        return value


class Message(ApiModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: UtcDatetime


# --- Blogs ---

class BlogCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    content: str = Field(..., min_length=1)
    excerpt: str = Field(..., min_length=1)
    tags: Tags = None
    cover_image: Optional[str] = Field(None, max_length=500)
    published: bool = False

    @field_validator("slug", mode="before")
    @classmethod
    def blank_slug(cls, value):
        # an empty form field means "derive it"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def derive_slug(self):
        if not self.slug:
            self.slug = slugify(self.title)
            if not self.slug:
                raise ValueError("slug could not be derived from the title")
        return self


class BlogUpdate(PartialModel):
    not_nullable: ClassVar[tuple] = ("title", "slug", "content", "excerpt", "published")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, min_length=1)
    tags: Tags = None
    cover_image: Optional[str] = Field(None, max_length=500)
    published: Optional[bool] = None


class Blog(ApiModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str
    tags: Optional[str] = None
    cover_image: Optional[str] = None
    published: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime


# --- Projects ---

class ProjectCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    technologies: Technologies = Field(default_factory=list)
    image_url: Optional[str] = Field(None, max_length=500)
    demo_url: Optional[str] = Field(None, max_length=500)
    repo_url: Optional[str] = Field(None, max_length=500)
    featured: bool = False
    order: int = 0


class ProjectUpdate(PartialModel):
    not_nullable: ClassVar[tuple] = ("title", "description", "technologies", "featured", "order")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    technologies: Annotated[Optional[List[str]], BeforeValidator(_split_list)] = None
    image_url: Optional[str] = Field(None, max_length=500)
    demo_url: Optional[str] = Field(None, max_length=500)
    repo_url: Optional[str] = Field(None, max_length=500)
    featured: Optional[bool] = None
    order: Optional[int] = None


class Project(ApiModel):
    id: int
    title: str
    description: str
    technologies: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    demo_url: Optional[str] = None
    repo_url: Optional[str] = None
    featured: bool = False
    order: int = 0


# --- Skills ---

class SkillCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    level: int = Field(0, ge=0, le=100)
    icon_name: Optional[str] = Field(None, max_length=100)


class SkillUpdate(PartialModel):
    not_nullable: ClassVar[tuple] = ("name", "category", "level")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[int] = Field(None, ge=0, le=100)
    icon_name: Optional[str] = Field(None, max_length=100)


class Skill(ApiModel):
    id: int
    name: str
    category: str
    level: int = 0
    icon_name: Optional[str] = None


# --- Theme ---

class ThemeUpdate(ApiModel):
    appearance: Literal["light", "dark", "system"]
