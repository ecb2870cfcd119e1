import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import Response

from config import Configuration
from decoder import decode_push_event
from dependencies import get_config, verify_gitea_signature
from dispatcher import dispatch

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/{path:path}", summary="Gitea Webhook Endpoint")
def handle_webhook(
        path: str,
        body_bytes: bytes = Depends(verify_gitea_signature),
        config: Configuration = Depends(get_config),
        x_gitea_event: str = Header(None),
):
    # Plain `def`: runs in the threadpool, so blocking on commands only holds this request's worker.
    logger.info(f"Webhook endpoint was called on /{path}.")

    event = decode_push_event(x_gitea_event, body_bytes)
    result = dispatch(event, config)

    return Response(content=result.render(), status_code=result.status_code, media_type="text/plain")
