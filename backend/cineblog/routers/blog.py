import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from cineblog.core.container import AppContainer, get_container
from cineblog.core.exceptions import BaseAppException, DocumentStoreException, PostNotFoundException
from cineblog.schemas.post import BannerUpload, CreatePostState
from cineblog.services.post_service import LISTING_CACHE_KEY
from cineblog.ui.movie_search import MovieSearchBox
from cineblog.ui.pages import render_page, render_to_string, sanitize_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["blog"])

FORM_TEXT_FIELDS = ("title", "content", "movieApiId", "movieTitle", "moviePosterUrl", "movieReleaseDate")
MOVIE_FIELDS = ("movieApiId", "movieTitle", "moviePosterUrl", "movieReleaseDate")

ROADMAP = [
    {
        "title": "Phase 1: Foundation (Complete)",
        "status": "complete",
        "summary": "The project's backbone is in place, ready for the core features of the movie blog.",
        "tasks": [
            "Project scaffolding",
            "Styling foundation",
            "Document store and media storage integration",
            "Initial deployment",
            "This progress tracking page",
        ],
    },
    {
        "title": "Phase 2: Core Blogging Engine",
        "status": "next",
        "summary": "Letting writers create posts and pull in movie data automatically.",
        "tasks": [
            "User authentication and profiles",
            "Secure routes for blog posts",
            "Blog post creator with rich text editing",
            "Integration with the movie database for autofill",
            "Public blog feed",
        ],
    },
    {
        "title": "Phase 3: Social & Community Features",
        "status": "horizon",
        "summary": "Turning the platform into a social network with community features.",
        "tasks": [
            "Following and followers",
            "Personalized feeds",
            "Comments and reactions on posts",
            "Direct messaging",
        ],
    },
]


def error_page(container: AppContainer, e: BaseAppException) -> HTMLResponse:
    logger.info(f"Rendering error page {e.status_code} ({e.error_code}): {e.message}")
    return render_page(
        "errors/error.html",
        status_code=e.status_code,
        settings=container.settings,
        status_code_value=e.status_code,
        message=e.message,
    )


def render_form(
    container: AppContainer,
    state: CreatePostState,
    box: Optional[MovieSearchBox] = None,
    values: Optional[Dict[str, Any]] = None,
    selected_movie: Optional[Dict[str, str]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    box = box or MovieSearchBox()
    values = dict(values or {})
    # editor.js copies the echoed content into innerHTML
    values["content"] = sanitize_html(values.get("content") or "")
    if selected_movie is None and box.selected is not None:
        selected_movie = container.movies.snapshot_fields(box.selected)
    return render_page(
        "blog/create.html",
        status_code=status_code,
        settings=container.settings,
        state=state,
        box=box,
        lookup=container.movies,
        values=values,
        selected_movie=selected_movie,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def home(container: AppContainer = Depends(get_container)):
    return render_page("home.html", settings=container.settings, roadmap=ROADMAP)


@router.get("/blog", response_class=HTMLResponse)
def list_posts(container: AppContainer = Depends(get_container)):
    cached = container.cache.get_text(LISTING_CACHE_KEY)
    if cached is not None:
        return HTMLResponse(cached)
    try:
        posts = container.posts.fetch_all_posts()
    except DocumentStoreException as e:
        return error_page(container, e)
    html = render_to_string("blog/index.html", settings=container.settings, posts=posts)
    container.cache.set_text(LISTING_CACHE_KEY, html, container.settings.LISTING_CACHE_TTL_SECONDS)
    return HTMLResponse(html)


@router.get("/blog/create", response_class=HTMLResponse)
def create_post_form(
    movie_query: Optional[str] = Query(None, description="Server-side movie search when JavaScript is off"),
    movie_id: Optional[int] = Query(None, description="Pick one of the movie_query results"),
    title: str = Query(""),
    content: str = Query(""),
    container: AppContainer = Depends(get_container)
):
    box = MovieSearchBox()
    if movie_query:
        box.run_search(movie_query, container.movies.find_movies)
        if movie_id is not None and not box.select_by_id(movie_id):
            logger.info(f"Movie {movie_id} not among results for '{movie_query}'")
    return render_form(container, CreatePostState(), box=box, values={"title": title, "content": content})


@router.post("/blog/create", response_class=HTMLResponse)
async def create_post(request: Request, container: AppContainer = Depends(get_container)):
    form = await request.form()
    fields: Dict[str, Any] = {name: form.get(name) for name in FORM_TEXT_FIELDS}

    banner = form.get("banner")
    if isinstance(banner, UploadFile) and banner.filename:
        data = await banner.read()
        if data:
            fields["banner"] = BannerUpload(
                filename=banner.filename,
                content_type=banner.content_type,
                data=data,
            )

    result = await run_in_threadpool(container.post_service().create_post, fields)
    if result.success:
        return RedirectResponse(result.redirect_to, status_code=result.status_code)

    selected_movie = None
    if fields.get("movieApiId"):
        selected_movie = {name: fields.get(name) or "" for name in MOVIE_FIELDS}
    return render_form(
        container,
        result.state,
        values={"title": fields.get("title") or "", "content": fields.get("content") or ""},
        selected_movie=selected_movie,
        status_code=result.status_code,
    )


@router.get("/blog/{slug}", response_class=HTMLResponse)
def show_post(slug: str, container: AppContainer = Depends(get_container)):
    try:
        post = container.posts.fetch_post_by_slug(slug)
    except DocumentStoreException as e:
        return error_page(container, e)
    if post is None:
        return error_page(container, PostNotFoundException())
    return render_page("blog/post.html", settings=container.settings, post=post)
