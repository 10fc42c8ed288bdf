"""API Gateway proxy handler that serves rendered buffers."""

from __future__ import annotations

import base64
import logging
import time
from typing import Any, Mapping, Optional

import PIL.Image

from .engine import RenderEngine
from .errors import ConfigError
from .imaging import encode_image, pil_format_name
from .params import config_from_params
from .sampling import RandomSampler

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


def _response(status: int, body: str = "", content_type: Optional[str] = None, *, binary: bool = False) -> dict:
    headers = {"Content-Type": content_type} if content_type else {}
    return {
        "statusCode": status,
        "headers": headers,
        "body": body,
        "isBase64Encoded": binary,
    }


def handle(
    event: Mapping[str, Any],
    context: Any = None,
    *,
    sampler: Optional[RandomSampler] = None,
    backend: str = "tensorflow",
) -> dict:
    """Render the fractal described by ``event["queryStringParameters"]``.

    The body is the raw RGBA buffer, or a PNG (or other Pillow format) when
    the query carries ``format``. Both are base64 encoded.
    """

    start = time.perf_counter()
    params = dict(event.get("queryStringParameters") or {})
    image_format = params.pop("format", None)
    config = config_from_params(params)
    logger.info("Handling request with config: %r", config)

    try:
        buffer = RenderEngine(sampler, backend).render(config)
    except ConfigError as exc:
        logger.error("Rejected render request: %s", exc)
        return _response(500, str(exc), "text/plain")
    except Exception:
        logger.exception("Render failed for config %r", config)
        return _response(500, "internal rendering error", "text/plain")

    if image_format:
        try:
            payload = encode_image(buffer, image_format)
        except (KeyError, ValueError, OSError):
            logger.exception("Could not encode buffer as %r", image_format)
            return _response(500, f"cannot encode as {image_format}", "text/plain")
        content_type = PIL.Image.MIME.get(pil_format_name(image_format), OCTET_STREAM)
    else:
        payload = buffer.tobytes()
        content_type = OCTET_STREAM

    logger.info("Finished generation in %.3fs. Sending %d bytes.", time.perf_counter() - start, len(payload))
    return _response(200, base64.b64encode(payload).decode("ascii"), content_type, binary=True)
