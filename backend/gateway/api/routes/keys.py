"""Raw Key Routes: GET, PUT/POST and DELETE on /{key}.

Invariants:
    - Bodies are stored as uninterpreted bytes
    - Responses carry no content type on success
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from gateway.api.dependencies import get_status_mode, get_translator, request_body
from gateway.api.response_normalizer import render_result
from gateway.core.domain_types import ErrorStatusMode, Key
from gateway.services.command_translator import CommandTranslator

router = APIRouter(tags=["keys"])


@router.get("/{key}", response_class=Response)
async def raw_get(
    key: str,
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """Raw bytes stored at key."""
    return render_result(await translator.raw_get(Key(key)), mode)


@router.api_route("/{key}", methods=["PUT", "POST"], response_class=Response)
async def raw_set(
    key: str,
    request: Request,
    body: bytes = Depends(request_body),
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """Store the request body at key, with an optional ?ttl= in seconds."""
    result = await translator.raw_set(Key(key), request.query_params, body)
    return render_result(result, mode)


@router.delete("/{key}", response_class=Response)
async def raw_delete(
    key: str,
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    return render_result(await translator.delete(Key(key)), mode)
