"""Content negotiation interceptor.

Serializes request entities according to the request's Content-Type and
deserializes response entities according to the response's Content-Type.

Request Content-Type resolution (first match wins):
1. ``Content-Type`` header on the request
2. ``mime`` configured on the interceptor
3. ``text/plain`` for string entities, ``application/json`` otherwise

Built-in converters:

| Media type | Write | Read |
|------------|-------|------|
| `application/json`, `*/*+json` | `json.dumps` | `json.loads` |
| `application/x-www-form-urlencoded` | `urlencode` | `dict(parse_qsl)` |
| `text/*` | `str` | unchanged text |

String and bytes entities are sent as they are. Responses with any other
media type keep their text entity.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import parse_qsl, urlencode

from rest_client_core.errors.exceptions import APIError, ContentNegotiationError
from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse, Transport

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT_SUFFIX = "application/json;q=0.8, text/plain;q=0.5, */*;q=0.2"


@dataclass(frozen=True)
class Converter:
    """Serializer/deserializer pair for one media type."""

    write: Callable[[Any], str]
    read: Callable[[str], Any]


def _write_form(entity: Any) -> str:
    if isinstance(entity, str):
        return entity
    return urlencode(entity, doseq=True)


JSON_CONVERTER = Converter(write=json.dumps, read=json.loads)
FORM_CONVERTER = Converter(write=_write_form, read=lambda text: dict(parse_qsl(text, keep_blank_values=True)))
TEXT_CONVERTER = Converter(write=str, read=lambda text: text)

DEFAULT_REGISTRY: Mapping[str, Converter] = {
    "application/json": JSON_CONVERTER,
    "application/x-www-form-urlencoded": FORM_CONVERTER,
    "text/plain": TEXT_CONVERTER,
}


def parse_media_type(content_type: str) -> str:
    """Return the media type of a Content-Type value without parameters."""
    return content_type.split(";")[0].strip().lower()


def lookup_converter(media_type: str, registry: Mapping[str, Converter]) -> Converter | None:
    """Find the converter for ``media_type``, honoring ``+json`` and ``text/*``."""
    if media_type in registry:
        return registry[media_type]
    if media_type.endswith("+json"):
        return registry.get("application/json")
    if media_type.startswith("text/"):
        return registry.get("text/plain")
    return None


class MimeInterceptor(Interceptor):
    """Serialize request entities and deserialize response entities.

    Args:
        wrapped: The transport to wrap
        mime: Default request Content-Type when the request sets none
        accept: Accept header sent when the request sets none
        registry: Media type to converter mapping (default: json, form, text)
    """

    def __init__(
        self,
        *,
        wrapped: Transport,
        mime: str | None = None,
        accept: str | None = None,
        registry: Mapping[str, Converter] | None = None,
    ) -> None:
        super().__init__(wrapped=wrapped)
        self.mime = mime
        self.accept = accept
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    async def handle(self, request: RestRequest) -> RestResponse:
        request = self._write(request)

        try:
            response = await self._wrapped.handle(request)
        except APIError as e:
            if e.response is not None:
                e.response = self._read(e.response, strict=False)
            raise

        return self._read(response, strict=True)

    def _content_type_for(self, request: RestRequest) -> str:
        if "content-type" in request.headers:
            return request.headers["content-type"]
        if self.mime:
            return self.mime
        return "text/plain" if isinstance(request.entity, str) or request.entity is None else "application/json"

    def _write(self, request: RestRequest) -> RestRequest:
        content_type = self._content_type_for(request)
        headers = {}
        if "accept" not in request.headers:
            headers["Accept"] = self.accept or f"{content_type}, {DEFAULT_ACCEPT_SUFFIX}"

        if request.entity is None:
            return request.with_headers(headers)

        headers["Content-Type"] = content_type
        entity = request.entity
        if not isinstance(entity, (str, bytes)):
            entity = self._serialize(request, content_type)

        return replace(request.with_headers(headers), entity=entity)

    def _serialize(self, request: RestRequest, content_type: str) -> str:
        media_type = parse_media_type(content_type)
        converter = lookup_converter(media_type, self.registry)
        if converter is None:
            raise ContentNegotiationError(f"No converter registered for {media_type!r}", request=request)

        try:
            return converter.write(request.entity)
        except (TypeError, ValueError) as e:
            raise ContentNegotiationError(
                f"Failed to serialize entity as {media_type}: {e}", request=request
            ) from e

    def _read(self, response: RestResponse, *, strict: bool) -> RestResponse:
        if not isinstance(response.entity, str) or not response.entity:
            return response

        converter = lookup_converter(response.content_type, self.registry)
        if converter is None:
            return response

        try:
            entity = converter.read(response.entity)
        except ValueError as e:
            if not strict:
                logger.debug(f"Keeping raw entity of error response: {e}")
                return response
            raise ContentNegotiationError(
                f"Failed to deserialize {response.content_type} response: {e}",
                request=response.request,
                response=response,
            ) from e

        return replace(response, entity=entity)
