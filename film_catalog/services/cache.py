import requests_cache


def init_requests_cache(expire_after: int = 86400):
    """
    Install a global requests-cache for outbound HTTP calls (TMDB).
    Catalog imports hit the same titles repeatedly, so 24h expiry is plenty.
    """
    # SQLite backend file 'http_cache.sqlite' in cwd
    requests_cache.install_cache("http_cache", expire_after=expire_after)
