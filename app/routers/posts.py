import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from app import dependencies as deps
from app.schemas.blog import (
    PasswordSubmission,
    PostDetail,
    PostSummary,
    ProtectedPostState,
    RevalidateRequest,
    RevalidateResult,
)
from app.security import get_api_key, get_settings
from app.services.access_gate import (
    load_protected_post,
    protected_cookie_name,
    verify_protected_post_password,
)
from app.services.cache import POSTS_TAG
from app.services.posts_service import PostsService
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

_STATE_STATUS_CODES = {
    "granted": 200,
    "locked": 200,
    "denied": 401,
    "misconfigured": 500,
}


@router.get("/posts", response_model=List[PostSummary])
def list_public_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Public posts, newest first."""
    try:
        return [PostSummary.from_entry(p) for p in service.list_public_posts()]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get(
    "/posts/all",
    response_model=List[PostSummary],
    dependencies=[Depends(get_api_key)],
)
def list_all_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Every post regardless of access, for operators."""
    try:
        return [PostSummary.from_entry(p) for p in service.list_posts()]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    request: Request,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post; protected bodies stay locked until verified."""
    try:
        lookup = service.get_post_by_slug(slug)
        if not lookup.found:
            raise HTTPException(status_code=404, detail="Post not found")

        cookie_value = request.cookies.get(protected_cookie_name(lookup.post.slug))
        state = load_protected_post(lookup.post, cookie_value)
        summary = PostSummary.from_entry(lookup.post)
        return PostDetail(**summary.model_dump(), state=state)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.post("/posts/{slug}/password", response_model=ProtectedPostState)
def verify_post_password(
    slug: str,
    submission: PasswordSubmission,
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(get_settings),
):
    """Verify a password for a protected post and set its access cookie."""
    try:
        lookup = service.get_post_by_slug(slug)
        if not lookup.found:
            raise HTTPException(status_code=404, detail="Post not found")

        state, credential = verify_protected_post_password(
            lookup.post,
            submission.password,
            secure=current_settings.is_production,
            max_age=current_settings.PROTECTED_COOKIE_MAX_AGE,
        )
        response = JSONResponse(
            content=state.model_dump(exclude_none=True),
            status_code=_STATE_STATUS_CODES[state.status],
        )
        if credential:
            response.set_cookie(
                key=credential.name,
                value=credential.value,
                max_age=credential.max_age,
                path=credential.path,
                httponly=credential.httponly,
                samesite=credential.samesite,
                secure=credential.secure,
            )
        return response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error verifying password for post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify password")


@router.post(
    "/revalidate",
    response_model=RevalidateResult,
    dependencies=[Depends(get_api_key)],
)
def revalidate(
    body: RevalidateRequest,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Evict cached posts by tag ("posts" or "post-<slug>")."""
    tag = body.tag.strip()
    if tag != POSTS_TAG and not tag.startswith("post-"):
        raise HTTPException(status_code=400, detail=f"Unknown cache tag: {tag}")
    evicted = service.invalidate(tag)
    logger.info(f"Revalidated tag {tag!r} ({evicted} entries)")
    return RevalidateResult(tag=tag, evicted=evicted)
