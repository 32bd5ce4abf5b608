# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# - SupabaseDep: the database connector
# - ParsedBody: request body as a dict, from JSON or a URL-encoded form
# =============================================================================

import json
import logging
import re
from typing import Annotated, Any

from fastapi import Depends, Request

from app.exceptions import InvalidRequestBodyError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


# Type alias for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]


# =============================================================================
# Body Parsing
# =============================================================================

def split_form_key(key: str) -> list[str]:
    """
    Split a bracketed form key into its path.

    Examples:
        "name" -> ["name"]
        "product[origin][country]" -> ["product", "origin", "country"]
        "tags[]" -> ["tags", ""]
        "weird[key" -> ["weird[key"]
    """
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]

    segments = _BRACKET_SEGMENT.findall(bracket + rest)
    # Anything that isn't a clean run of [segment]s is kept as a literal key
    if "".join(f"[{s}]" for s in segments) != bracket + rest:
        return [key]
    return [head, *segments]


def _assign(target: dict[str, Any], path: list[str], value: Any) -> None:
    key = path[0]

    if len(path) == 1:
        if key not in target:
            target[key] = value
        elif isinstance(target[key], list):
            target[key].append(value)
        else:
            target[key] = [target[key], value]
        return

    if path[1] == "" and len(path) == 2:
        bucket = target.get(key)
        if bucket is None:
            target[key] = [value]
        elif isinstance(bucket, list):
            bucket.append(value)
        else:
            target[key] = [bucket, value]
        return

    child = target.get(key)
    if not isinstance(child, dict):
        child = target[key] = {}
    _assign(child, path[1:], value)


def expand_form(items: list[tuple[str, Any]]) -> dict[str, Any]:
    """
    Turn flat form pairs into nested objects.

    Bracketed keys build nested dicts, "key[]" builds a list, and a plain
    key repeated several times collects its values into a list.
    """
    result: dict[str, Any] = {}
    for key, value in items:
        _assign(result, split_form_key(key), value)
    return result


async def parse_body(request: Request) -> dict[str, Any]:
    """
    Read the request body as a dict.

    Accepts JSON and URL-encoded or multipart forms. An empty body or an
    unsupported content type yields an empty dict.

    Raises:
        InvalidRequestBodyError: If a JSON body can't be decoded or isn't an object
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type == "application/json" or content_type.endswith("+json"):
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Rejected malformed JSON body on {request.url.path}")
            raise InvalidRequestBodyError(content_type)
        if not isinstance(data, dict):
            raise InvalidRequestBodyError(content_type)
        return data

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return expand_form(form.multi_items())

    return {}


ParsedBody = Annotated[dict[str, Any], Depends(parse_body)]
