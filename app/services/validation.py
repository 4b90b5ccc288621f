from typing import Any, Dict

from app.core.exceptions.exceptions import InvalidResponseError

REMOVED = '[Removed]'


def is_displayable_article(article: Any, require_image: bool = False) -> bool:
    """title and description must be real strings, not the upstream's removal marker"""
    if not isinstance(article, dict):
        return False
    title = article.get('title')
    description = article.get('description')
    if not isinstance(title, str) or not isinstance(description, str):
        return False
    if title == REMOVED or description == REMOVED:
        return False
    if require_image and not (isinstance(article.get('urlToImage'), str) and article['urlToImage']):
        return False
    return True


def validate_response(raw: Any) -> Dict[str, Any]:
    """Check an upstream payload and return its normalized copy.

    Raises InvalidResponseError for non-object payloads, error payloads
    (carrying the upstream message and code) and any status but "ok".
    When an `articles` list is present, undisplayable entries are dropped.
    """
    if not isinstance(raw, dict):
        raise InvalidResponseError('Invalid API response format')

    status = raw.get('status')
    if status == 'error':
        raise InvalidResponseError(raw.get('message') or 'API returned an error', code=raw.get('code'))
    if status != 'ok':
        raise InvalidResponseError('Invalid API response status')

    normalized = dict(raw)
    if isinstance(raw.get('articles'), list):
        normalized['articles'] = [a for a in raw['articles'] if is_displayable_article(a)]
    return normalized
