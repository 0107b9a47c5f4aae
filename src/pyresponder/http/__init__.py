"""
HTTP protocol pieces: reading requests, building responses, status codes
and content types.

    from pyresponder.http import RequestView, ResponseBuilder, HTTPStatus

    request = RequestView(b"GET /echo?content=hi HTTP/1.1\\r\\n\\r\\n")
    request.query_params        # {"content": "hi"}

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type(ContentType.HTML)
        .body("hi")
        .build())
    response.to_bytes()         # b"HTTP/1.1 200 OK\\r\\n..."
"""

from .content_types import ContentType, infer_content_type
from .request import RequestView
from .response import HTTPResponse, ResponseBuilder, html
from .status_codes import HTTPStatus

__all__ = [
    "ContentType",
    "infer_content_type",
    "RequestView",
    "HTTPResponse",
    "ResponseBuilder",
    "html",
    "HTTPStatus",
]
