"""Document Routes: RedisJSON access under /{key}/json, /{key}/pop and /{key}/insert.

Invariants:
    - `path` query parameter defaults to the document root "."
    - DELETE /{key}/json removes the whole key, same as DELETE /{key}
    - Registered before the raw key router
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from gateway.api.dependencies import get_status_mode, get_translator, request_body
from gateway.api.response_normalizer import render_result
from gateway.core.domain_types import ErrorStatusMode, Key
from gateway.services.command_translator import CommandTranslator

router = APIRouter(tags=["documents"])


@router.get("/{key}/json", response_class=Response)
async def document_get(
    key: str,
    request: Request,
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """JSON stored at (key, ?path=), exactly as the store serialized it."""
    result = await translator.document_get(Key(key), request.query_params)
    return render_result(result, mode)


@router.api_route("/{key}/json", methods=["PUT", "POST"], response_class=Response)
async def document_set(
    key: str,
    request: Request,
    body: bytes = Depends(request_body),
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """Write the JSON body at (key, ?path=)."""
    result = await translator.document_set(Key(key), request.query_params, body)
    return render_result(result, mode)


@router.delete("/{key}/json", response_class=Response)
async def document_delete(
    key: str,
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    return render_result(await translator.delete(Key(key)), mode)


@router.get("/{key}/pop", response_class=Response)
async def array_pop(
    key: str,
    request: Request,
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """Remove and return the element at ?index= (default 0) of the array at ?path=."""
    result = await translator.array_pop(Key(key), request.query_params)
    return render_result(result, mode)


@router.api_route("/{key}/insert", methods=["PUT", "POST"], response_class=Response)
async def array_insert(
    key: str,
    request: Request,
    body: bytes = Depends(request_body),
    translator: CommandTranslator = Depends(get_translator),
    mode: ErrorStatusMode = Depends(get_status_mode),
):
    """Append the JSON body to the array at ?path=, or insert it before ?index=."""
    result = await translator.array_insert(Key(key), request.query_params, body)
    return render_result(result, mode)
