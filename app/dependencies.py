from fastapi import Depends

from app.repos.posts_repo import FilesystemPostsRepo, SnapshotPostsRepo
from app.security import get_settings
from app.services.cache import InMemoryTagCache
from app.services.posts_service import PostsService
from app.settings import Settings

# Shared across requests so cached posts survive between them
post_cache = InMemoryTagCache()


def get_cache():
    return post_cache


def get_posts_repo(current_settings: Settings = Depends(get_settings)):
    if current_settings.CONTENT_MODE == "snapshot":
        return SnapshotPostsRepo.from_settings(current_settings)
    return FilesystemPostsRepo.from_settings(current_settings)


def get_posts_service(
    repo=Depends(get_posts_repo),
    cache=Depends(get_cache),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo, cache=cache, ttl_seconds=current_settings.CACHE_TTL_SECONDS
    )
