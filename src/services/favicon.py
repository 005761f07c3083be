"""Favicon URL derivation."""
import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

FAVICON_SERVICE_URL = "https://www.google.com/s2/favicons?sz=64&domain={host}"


def get_favicon_url(url: str) -> str:
    """
    Build a favicon-service URL for the host of ``url``.

    No request is made; this only formats a string. Returns an empty string if
    the URL can't be parsed or its host contains whitespace.

    Example:
        >>> get_favicon_url("https://docs.python.org/3/")
        'https://www.google.com/s2/favicons?sz=64&domain=docs.python.org'
    """
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        logger.warning("Could not parse URL for favicon: %r", url)
        return ""
    # netloc may carry credentials ("user:pass@host"); only the host part is wanted
    host = netloc.rpartition("@")[2]
    if any(c.isspace() for c in host):
        logger.warning("Invalid host in URL for favicon: %r", url)
        return ""
    return FAVICON_SERVICE_URL.format(host=host)
