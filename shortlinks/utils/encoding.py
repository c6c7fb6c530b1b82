import uuid

SHORT_CODE_LENGTH = 8


def generate_short_code() -> str:
    """Generate an 8-character lowercase hex code from a random UUID.

    Collisions are rare but possible; the link store enforces uniqueness.
    """
    return uuid.uuid4().hex[:SHORT_CODE_LENGTH]
