from pydantic import HttpUrl, TypeAdapter, ValidationError

from shortlinks.core.errors import InvalidInputError

MAX_URL_LENGTH = 2048

_http_url = TypeAdapter(HttpUrl)


def validate_target(target) -> str:
    """Return the stripped target URL or raise InvalidInputError.

    The stripped input is returned as given rather than pydantic's normalized
    form, so a link redirects to exactly what was submitted.
    """
    if not isinstance(target, str) or not target.strip():
        raise InvalidInputError("no url")

    target = target.strip()
    if len(target) > MAX_URL_LENGTH:
        raise InvalidInputError(f"URL must be less than {MAX_URL_LENGTH} characters")

    try:
        _http_url.validate_python(target)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid URL: {e.errors()[0]['msg']}") from e

    return target
