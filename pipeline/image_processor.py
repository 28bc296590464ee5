"""
Image Processor Pipeline
Decode → trim → background removal → resize → encode, one image at a time.
Both the HTTP server and the browser bridge are thin wrappers around this.
"""

import logging

from models.image import Image
from models.process_options import ProcessOptions, ProcessedImage
from services.background_service import BackgroundService
from services.dimension_service import DimensionService
from services.image_service import ImageService
from services.trim_service import TrimService

logger = logging.getLogger(__name__)


def transform_image(
    image: Image,
    options: ProcessOptions,
    *,
    image_service: ImageService,
    trim_service: TrimService = TrimService(),
    background_service: BackgroundService = BackgroundService(),
    dimension_service: DimensionService = DimensionService(),
) -> Image:
    """
    Run the pixel stages on an already decoded image.

    Trim runs before background removal so the flood fill is seeded from the
    trimmed edges and has less area to cover.
    """
    if options.trim:
        image = trim_service.trim(image)

    if options.remove_background:
        image = background_service.remove_background(image)

    target = dimension_service.resolve_target_size(
        image.width, image.height, options.width, options.height
    )
    image_service.check_target_size(target)
    return image_service.resize(image, target)


def process_image(
    data: bytes,
    options: ProcessOptions,
    *,
    image_service: ImageService | None = None,
) -> ProcessedImage:
    """
    Full pipeline on encoded bytes.

    Raises:
        ImageDecodeError: input could not be decoded (nothing else runs)
        ImageTooLargeError: decoded image or requested output is above the pixel ceiling
        ImageEncodeError: output could not be encoded
    """
    image_service = image_service or ImageService()

    image = image_service.decode(data)
    logger.info(
        f"Processing {image.width}x{image.height} image "
        f"(trim={options.trim}, remove_background={options.remove_background}, "
        f"format={options.format}, requested={options.width}x{options.height})"
    )

    result = transform_image(image, options, image_service=image_service)
    encoded = image_service.encode(result, options.format, options.quality, options.compression_level)

    logger.info(f"Encoded {result.width}x{result.height} {options.format} ({len(encoded)} bytes)")
    return ProcessedImage(
        data=encoded,
        mime_type=options.mime_type,
        width=result.width,
        height=result.height,
        extension=options.extension,
    )
