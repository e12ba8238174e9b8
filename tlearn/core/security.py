"""Password hashing (argon2) and session tokens (HS256 JWT)."""
import enum
import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwk, jwt
from jose.utils import base64url_decode
from passlib.context import CryptContext

from tlearn.core.errors import InternalError

# argon2id work factors; memory_cost is in KiB
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 64 * 1024
ARGON2_PARALLELISM = 4

ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=ARGON2_TIME_COST,
    argon2__memory_cost=ARGON2_MEMORY_COST,
    argon2__parallelism=ARGON2_PARALLELISM,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time check. False on mismatch; InternalError if `hashed` is not a known digest."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError) as exc:
        raise InternalError(f"unreadable password hash: {type(exc).__name__}") from exc


def dummy_verify() -> None:
    """Burn one verification's worth of time (login with an unknown username)."""
    pwd_context.dummy_verify()


class TokenErrorKind(str, enum.Enum):
    MALFORMED = "malformed"
    UNEXPECTED_ALGORITHM = "unexpected_algorithm"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    INVALID_SUBJECT = "invalid_subject"


class TokenError(Exception):
    def __init__(self, kind: TokenErrorKind):
        self.kind = kind
        super().__init__(kind.value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def issue_token(
    user_id: uuid.UUID,
    secret: str,
    *,
    now: datetime | None = None,
    ttl: timedelta = TOKEN_TTL,
) -> str:
    """Create a signed session token for the user."""
    if not secret:
        raise ValueError("secret_blank")
    issued_at = now or _utcnow()
    claims = {
        "user_id": str(user_id),
        "exp": int((issued_at + ttl).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str, *, now: datetime | None = None) -> uuid.UUID:
    """Return the user id bound to `token`, or raise TokenError.

    The algorithm is checked before the signature so that tokens signed
    (or unsigned) with anything but HS256 never reach key verification.
    """
    if not secret:
        raise ValueError("secret_blank")

    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise TokenError(TokenErrorKind.MALFORMED)

    if header.get("alg") != ALGORITHM:
        raise TokenError(TokenErrorKind.UNEXPECTED_ALGORITHM)

    signing_input, _, encoded_sig = token.rpartition(".")
    try:
        signature = base64url_decode(encoded_sig.encode("utf-8"))
    except (ValueError, TypeError):
        raise TokenError(TokenErrorKind.MALFORMED)

    key = jwk.construct(secret, ALGORITHM)
    if not key.verify(signing_input.encode("utf-8"), signature):
        raise TokenError(TokenErrorKind.SIGNATURE_INVALID)

    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        raise TokenError(TokenErrorKind.MALFORMED)

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise TokenError(TokenErrorKind.MALFORMED)
    if (now or _utcnow()).timestamp() >= exp:
        raise TokenError(TokenErrorKind.EXPIRED)

    raw_id = claims.get("user_id")
    if not isinstance(raw_id, str):
        raise TokenError(TokenErrorKind.INVALID_SUBJECT)
    try:
        return uuid.UUID(raw_id)
    except ValueError:
        raise TokenError(TokenErrorKind.INVALID_SUBJECT)
