# dependencies.py

import logging

from fastapi import Depends, Header, Request, status

from config import ConfigStore, Configuration
from errors import AuthError
from utils import verify_signature

logger = logging.getLogger(__name__)


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_config(store: ConfigStore = Depends(get_config_store)) -> Configuration:
    # One snapshot per request; FastAPI caches it for every dependency that asks.
    return store.current


async def verify_gitea_signature(
        request: Request,
        config: Configuration = Depends(get_config),
        signature: str = Header(None, alias="X-Gitea-Signature"),
) -> bytes:
    """
    Check the request body against X-Gitea-Signature and hand the verified body on.
    """
    body_bytes = await request.body()
    if not signature:
        logger.error("Missing X-Gitea-Signature header.")
        raise AuthError("missing signature header", status_code=status.HTTP_401_UNAUTHORIZED)
    if not verify_signature(config.secret, body_bytes, signature):
        raise AuthError("invalid signature", status_code=status.HTTP_403_FORBIDDEN)
    return body_bytes
