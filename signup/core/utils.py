# signup/core/utils.py
import secrets
from typing import Optional

# ------------------------------------------------------------
# Code generation and comparison helpers
# ------------------------------------------------------------

MIN_CODE_BYTES = 8


def gen_code(nbytes: int = MIN_CODE_BYTES) -> str:
    """Random hex code (2 chars per byte) from the OS CSPRNG."""
    return secrets.token_hex(max(MIN_CODE_BYTES, nbytes))


def codes_match(supplied: Optional[str], stored: Optional[str]) -> bool:
    """Constant-time comparison; a missing code never matches."""
    if not supplied or not stored:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))
