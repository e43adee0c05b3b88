from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from portfolio.dependencies import get_storage
from portfolio.schemas import Blog, Project, Skill
from portfolio.storage.base import Storage

router = APIRouter(prefix="/api", tags=["public"])


@router.get("/projects", response_model=List[Project])
def list_projects(featured: bool = False, storage: Storage = Depends(get_storage)):
    """All projects by display order; ?featured=true for the landing page."""
    return storage.list_projects(featured_only=featured)


@router.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: int, storage: Storage = Depends(get_storage)):
    project = storage.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/skills", response_model=List[Skill])
def list_skills(category: Optional[str] = None, storage: Storage = Depends(get_storage)):
    return storage.list_skills(category=category)


@router.get("/blogs", response_model=List[Blog])
def list_blogs(storage: Storage = Depends(get_storage)):
    """Published posts only, newest first"""
    return storage.list_blogs(published_only=True)


@router.get("/blogs/{slug}", response_model=Blog)
def get_blog(slug: str, storage: Storage = Depends(get_storage)):
    """Get a single published post by slug. Drafts look exactly like missing posts."""
    blog = storage.get_blog_by_slug(slug)
    if not blog or not blog.published:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return blog
