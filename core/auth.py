from typing import Optional

from fastapi import Depends, Header, Request

from core.exceptions import NotAuthenticatedError, NotAuthorizedError, TokenError
from core.logging_config import get_logger, set_user_id
from core.security import TokenService, get_token_service
from schemas.auth_schema import IdentityClaim

logger = get_logger(__name__)


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    token_service: TokenService = Depends(get_token_service),
) -> IdentityClaim:
    """
    Resolve the caller from the Authorization header.

    No bearer token means NotAuthenticatedError (401). A token that fails
    verification means NotAuthorizedError (403). On success the claim is
    attached to ``request.state.identity`` and returned.

    Must stay async: a sync dependency runs on a copied context, and the
    user id set here would not reach the handler or the repositories.
    """
    token = _extract_bearer_token(authorization)
    if not token:
        raise NotAuthenticatedError()

    try:
        identity = token_service.verify(token)
    except TokenError as e:
        logger.log_auth_event("verify_token", success=False, reason=e.message)
        raise NotAuthorizedError(e.message, code=e.code)

    request.state.identity = identity
    set_user_id(str(identity.id))
    return identity
