import secrets

CODE_MIN = 100000
CODE_MAX = 999999


def generate_verification_code() -> str:
    """Return a 6-digit code in ``100000..999999``, uniformly distributed."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
