import secrets
import string


def id_generator(prefix: str, length: int):
    """Return a factory producing ids like ``<prefix>_<random chars>``."""
    alphabet = string.ascii_lowercase + string.digits

    def generate() -> str:
        return f"{prefix}_" + "".join(secrets.choice(alphabet) for _ in range(length))

    return generate
