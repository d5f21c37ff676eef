from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")

def is_valid_url(url: str) -> bool:
    """
    True for absolute http(s) URLs with a host.
    Rejects other schemes, relative references and anything with whitespace.
    """
    if not url or any(c.isspace() for c in url):
        return False
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(host)
