from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from portfolio.dependencies import get_current_user
from portfolio.schemas import SessionUser

router = APIRouter(include_in_schema=False)


def page(request: Request, name: str) -> FileResponse:
    path = request.app.state.settings.static_dir / "pages" / name
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Page not found")
    return FileResponse(path)


# Page Routes

@router.get("/")
def home_page(request: Request):
    return page(request, "index.html")


@router.get("/projects")
def projects_page(request: Request):
    return page(request, "projects.html")


@router.get("/blogs")
def blogs_page(request: Request):
    return page(request, "blogs.html")


@router.get("/blogs/{slug}")
def blog_post_page(slug: str, request: Request):
    return page(request, "blog-post.html")


@router.get("/login")
def login_page(request: Request):
    return page(request, "login.html")


@router.get("/admin")
def admin_page(request: Request, user: Optional[SessionUser] = Depends(get_current_user)):
    if not user or not user.is_admin:
        return RedirectResponse("/login", status_code=303)
    return page(request, "admin.html")
