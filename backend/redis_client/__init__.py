from functools import lru_cache

from redis import Redis
from rq import Queue


@lru_cache(maxsize=None)
def get_redis(url: str) -> Redis:
    return Redis.from_url(url, decode_responses=True)


@lru_cache(maxsize=None)
def get_queue(name: str, url: str) -> Queue:
    # rq stores pickled job payloads, so its connection must not decode responses.
    return Queue(name, connection=Redis.from_url(url))


def init_redis(*clients: Redis) -> None:
    for client in clients:
        client.ping()
