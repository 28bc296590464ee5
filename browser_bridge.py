"""
Browser entry point.

Loaded inside a Python-in-the-browser runtime (e.g. Pyodide), `register(js)`
exposes `processImage(imageData, width, height, trim, format, quality
[, removeBackground])` to JavaScript. Every outcome is a dict so the JS side
never has to catch a Python exception. Under Pyodide the dict is converted
at the boundary into a plain JS object with a Uint8Array under `data`.
"""

import logging
import sys
from typing import Any, Callable, Dict

from models.process_options import ProcessOptions
from pipeline.image_processor import process_image as run_pipeline
from repositories.image_repository import ImageDecodeError, ImageEncodeError
from services.image_service import ImageService, ImageTooLargeError

logger = logging.getLogger(__name__)

REQUIRED_ARGS = 6

_image_service = None


def _service() -> ImageService:
    global _image_service
    if _image_service is None:
        _image_service = ImageService()
    return _image_service


def _to_bytes(image_data: Any) -> bytes:
    """Uint8Array proxies expose to_bytes()/to_py(); everything else goes through bytes()."""
    if hasattr(image_data, "to_bytes"):
        return image_data.to_bytes()
    if hasattr(image_data, "to_py"):
        return bytes(image_data.to_py())
    return bytes(image_data)


def process_image(
    image_data: Any,
    width: int,
    height: int,
    trim: bool,
    format: str,
    quality: int,
    remove_background: bool = False,
) -> Dict[str, Any]:
    """
    Returns {"data", "mimeType", "width", "height", "size"} or {"error"}.
    """
    try:
        options = ProcessOptions(
            trim=bool(trim),
            remove_background=bool(remove_background),
            format=format,
            quality=int(quality or 0),
            width=int(width or 0),
            height=int(height or 0),
        )
        result = run_pipeline(_to_bytes(image_data), options, image_service=_service())
    except (ImageDecodeError, ImageEncodeError, ImageTooLargeError) as e:
        logger.warning(f"processImage failed: {e}")
        return {"error": str(e)}
    except (TypeError, ValueError) as e:
        logger.warning(f"processImage got bad arguments: {e}")
        return {"error": f"invalid arguments: {e}"}

    return {
        "data": result.data,
        "mimeType": result.mime_type,
        "width": result.width,
        "height": result.height,
        "size": result.size,
    }


def process_image_args(*args) -> Dict[str, Any]:
    """Positional form used from JavaScript."""
    if len(args) < REQUIRED_ARGS:
        return {"error": "missing arguments"}
    return process_image(*args[:REQUIRED_ARGS + 1])


def to_js_object(result: Dict[str, Any]) -> Any:
    """dict → plain JS object; bytes become a Uint8Array."""
    import js
    from pyodide.ffi import to_js

    return to_js(result, dict_converter=js.Object.fromEntries)


def register(
    scope: Any,
    name: str = "processImage",
    convert: Callable[[Dict[str, Any]], Any] | None = None,
) -> None:
    """
    Install the entry point on a JS global scope (Pyodide's `js` module).

    *convert* maps each result dict before it is handed to JavaScript; under
    Pyodide (sys.platform == "emscripten") it defaults to `to_js_object`.
    """
    if convert is None and sys.platform == "emscripten":
        convert = to_js_object

    if convert is None:
        entry = process_image_args
    else:
        def entry(*args):
            return convert(process_image_args(*args))

    setattr(scope, name, entry)
    logger.info(f"Registered {name} on {scope!r}")
