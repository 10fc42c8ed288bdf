import base64
import inspect
import io

import numpy as np
import PIL.Image
import pytest

from mandelbrot_tiles import FixedSampler
from mandelbrot_tiles.handler import handle

SMALL = {
    "width": "8",
    "height_px": "6",
    "maxIter": "30",
    "samples": "1",
    "numBlocks": "4",
    "numThreads": "2",
}


def _event(**params):
    return {"queryStringParameters": {**SMALL, **params}}


def test_raw_buffer_response():
    response = handle(_event(), sampler=FixedSampler(), backend="python")

    assert response["statusCode"] == 200
    assert response["isBase64Encoded"] is True
    assert response["headers"] == {"Content-Type": "application/octet-stream"}
    body = base64.b64decode(response["body"])
    assert len(body) == 8 * 6 * 4
    assert (np.frombuffer(body, dtype=np.uint8)[3::4] == 255).all()


def test_png_response():
    response = handle(_event(format="png"), sampler=FixedSampler(), backend="python")

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "image/png"
    image = PIL.Image.open(io.BytesIO(base64.b64decode(response["body"])))
    assert image.size == (8, 6)
    assert image.mode == "RGBA"


def test_config_error_is_reported_as_bad_request(caplog):
    with caplog.at_level("ERROR", logger="mandelbrot_tiles.handler"):
        response = handle(_event(samples="0"), backend="python")

    assert response["statusCode"] == 500
    assert response["isBase64Encoded"] is False
    assert "samples" in response["body"]
    assert "Rejected render request" in caplog.text


def test_unknown_format_is_a_transport_failure(caplog):
    with caplog.at_level("ERROR", logger="mandelbrot_tiles.handler"):
        response = handle(_event(format="nosuchformat"), sampler=FixedSampler(), backend="python")

    assert response["statusCode"] == 500
    assert "Could not encode" in caplog.text
    assert "Rejected render request" not in caplog.text


def test_missing_query_uses_defaults_and_validates(monkeypatch):
    seen = {}

    def fake_render(self, config, cancel=None):
        seen["config"] = config
        raise RuntimeError("boom")

    monkeypatch.setattr("mandelbrot_tiles.engine.RenderEngine.render", fake_render)
    response = handle({})

    assert response["statusCode"] == 500
    assert seen["config"].img_width == 1024


def test_default_backend_is_tensorflow():
    assert inspect.signature(handle).parameters["backend"].default == "tensorflow"


@pytest.mark.parametrize(
    "image_format, content_type",
    [("png", "image/png"), ("jpg", "image/jpeg"), ("JPEG", "image/jpeg"), ("tif", "image/tiff")],
)
def test_content_type_is_the_registered_mime_type(image_format, content_type):
    response = handle(_event(format=image_format), sampler=FixedSampler(), backend="python")

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == content_type
    image = PIL.Image.open(io.BytesIO(base64.b64decode(response["body"])))
    assert image.size == (8, 6)
