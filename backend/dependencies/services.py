from fastapi import Request

from settings import ServiceSettings
from utils.cache import Cache
from utils.thumbnails import ThumbnailGenerator


def get_settings(request: Request) -> ServiceSettings:
    return request.app.state.settings


def get_cache(request: Request) -> Cache:
    return request.app.state.cache


def get_thumbnail_generator(request: Request) -> ThumbnailGenerator:
    return request.app.state.thumbnails
