"""
Admin API: messages, projects, skills and blogs.

Every route here requires a valid admin credential (see
``portfolio.dependencies.require_admin``); the check runs before the body is
even looked at, so a rejected request never reaches storage.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from portfolio.config import Settings
from portfolio.dependencies import get_app_settings, get_storage, require_admin
from portfolio.schemas import (
    ActionResult,
    Blog, BlogCreate, BlogUpdate,
    Message,
    Project, ProjectCreate, ProjectUpdate,
    Skill, SkillCreate, SkillUpdate,
)
from portfolio.services.notifications import verify_email_connection
from portfolio.storage.base import Storage

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _not_found(kind: str):
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found")


# --- Messages (read and delete only) ---

@router.get("/messages", response_model=List[Message])
def list_messages(storage: Storage = Depends(get_storage)):
    return storage.list_messages()


@router.get("/messages/{message_id}", response_model=Message)
def get_message(message_id: int, storage: Storage = Depends(get_storage)):
    message = storage.get_message(message_id)
    if not message:
        raise _not_found("Message")
    return message


@router.delete("/messages/{message_id}", response_model=ActionResult)
def delete_message(message_id: int, storage: Storage = Depends(get_storage)):
    if not storage.delete_message(message_id):
        raise _not_found("Message")
    return ActionResult(success=True, message="Message deleted successfully")


# --- Projects ---

@router.get("/projects", response_model=List[Project])
def list_projects(storage: Storage = Depends(get_storage)):
    return storage.list_projects()


@router.post("/projects", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(data: ProjectCreate, storage: Storage = Depends(get_storage)):
    return storage.create_project(data)


@router.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: int, storage: Storage = Depends(get_storage)):
    project = storage.get_project(project_id)
    if not project:
        raise _not_found("Project")
    return project


@router.put("/projects/{project_id}", response_model=Project)
def update_project(project_id: int, data: ProjectUpdate, storage: Storage = Depends(get_storage)):
    project = storage.update_project(project_id, data)
    if not project:
        raise _not_found("Project")
    return project


@router.delete("/projects/{project_id}", response_model=ActionResult)
def delete_project(project_id: int, storage: Storage = Depends(get_storage)):
    if not storage.delete_project(project_id):
        raise _not_found("Project")
    return ActionResult(success=True, message="Project deleted successfully")


# --- Skills ---

@router.get("/skills", response_model=List[Skill])
def list_skills(storage: Storage = Depends(get_storage)):
    return storage.list_skills()


@router.post("/skills", response_model=Skill, status_code=status.HTTP_201_CREATED)
def create_skill(data: SkillCreate, storage: Storage = Depends(get_storage)):
    return storage.create_skill(data)


@router.get("/skills/{skill_id}", response_model=Skill)
def get_skill(skill_id: int, storage: Storage = Depends(get_storage)):
    skill = storage.get_skill(skill_id)
    if not skill:
        raise _not_found("Skill")
    return skill


@router.put("/skills/{skill_id}", response_model=Skill)
def update_skill(skill_id: int, data: SkillUpdate, storage: Storage = Depends(get_storage)):
    skill = storage.update_skill(skill_id, data)
    if not skill:
        raise _not_found("Skill")
    return skill


@router.delete("/skills/{skill_id}", response_model=ActionResult)
def delete_skill(skill_id: int, storage: Storage = Depends(get_storage)):
    if not storage.delete_skill(skill_id):
        raise _not_found("Skill")
    return ActionResult(success=True, message="Skill deleted successfully")


# --- Blogs (drafts included) ---

@router.get("/blogs", response_model=List[Blog])
def list_blogs(storage: Storage = Depends(get_storage)):
    return storage.list_blogs()


@router.post("/blogs", response_model=Blog, status_code=status.HTTP_201_CREATED)
def create_blog(data: BlogCreate, storage: Storage = Depends(get_storage)):
    # Check if slug already exists
    if storage.get_blog_by_slug(data.slug):
        raise HTTPException(status_code=400, detail="A post with this slug already exists")
    return storage.create_blog(data)


@router.get("/blogs/{blog_id}", response_model=Blog)
def get_blog(blog_id: int, storage: Storage = Depends(get_storage)):
    blog = storage.get_blog(blog_id)
    if not blog:
        raise _not_found("Blog post")
    return blog


@router.put("/blogs/{blog_id}", response_model=Blog)
def update_blog(blog_id: int, data: BlogUpdate, storage: Storage = Depends(get_storage)):
    if not storage.get_blog(blog_id):
        raise _not_found("Blog post")

    if data.slug is not None:
        existing = storage.get_blog_by_slug(data.slug)
        if existing and existing.id != blog_id:
            raise HTTPException(status_code=400, detail="A post with this slug already exists")

    blog = storage.update_blog(blog_id, data)
    if not blog:
        raise _not_found("Blog post")
    return blog


@router.delete("/blogs/{blog_id}", response_model=ActionResult)
def delete_blog(blog_id: int, storage: Storage = Depends(get_storage)):
    if not storage.delete_blog(blog_id):
        raise _not_found("Blog post")
    return ActionResult(success=True, message="Blog post deleted successfully")


# --- Email settings check ---

email_router = APIRouter(prefix="/api/email", tags=["admin"], dependencies=[Depends(require_admin)])


@email_router.get("/check")
def check_email(settings: Settings = Depends(get_app_settings)):
    """Try to log in to the configured SMTP server and report what went wrong."""
    return verify_email_connection(settings)
