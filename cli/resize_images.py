import os
import sys
import logging
import argparse
from pathlib import Path
from typing import Iterator, List
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.process_options import ProcessOptions
from pipeline.image_processor import transform_image
from repositories.image_repository import ImageDecodeError, ImageEncodeError
from services.image_service import ImageService, ImageTooLargeError

logger = logging.getLogger(__name__)

VALID_EXTS = {ext.strip().lower() for ext in
              os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.webp").split(",")}


def iter_inputs(paths: List[str], recursive: bool = False) -> Iterator[Path]:
    """Expand files and directories into the image files to process."""
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            pattern = "**/*" if recursive else "*"
            for p in sorted(path.glob(pattern)):
                if p.is_file() and p.suffix.lower() in VALID_EXTS:
                    yield p
        else:
            yield path


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Trim, drop background and resize images.")
    ap.add_argument("inputs", nargs="+", help="image files or directories")
    ap.add_argument("--width", type=int, default=0)
    ap.add_argument("--height", type=int, default=0)
    ap.add_argument("--format", default=os.getenv("DEFAULT_OUTPUT_FORMAT", "png"),
                    choices=["png", "jpeg", "jpg"])
    ap.add_argument("--quality", type=int, default=int(os.getenv("DEFAULT_JPEG_QUALITY", "90")))
    ap.add_argument("--compression", type=int, default=None, choices=range(10),
                    help="PNG compression level, overrides --quality for PNG")
    ap.add_argument("--trim", action="store_true", help="trim solid or transparent borders")
    ap.add_argument("--remove-background", action="store_true",
                    help="make the edge-connected background transparent")
    ap.add_argument("--recursive", action="store_true")
    ap.add_argument("--output-dir", default=None,
                    help="defaults to each input's own directory")
    return ap


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    options = ProcessOptions(
        trim=args.trim,
        remove_background=args.remove_background,
        format=args.format,
        quality=args.quality,
        width=args.width,
        height=args.height,
        compression_level=args.compression,
    )
    image_service = ImageService()

    failed = 0
    processed = 0
    for path in iter_inputs(args.inputs, recursive=args.recursive):
        try:
            image = image_service.load(path)
            result = transform_image(image, options, image_service=image_service)
            data = image_service.encode(result, options.format, options.quality, options.compression_level)
        except (FileNotFoundError, ImageDecodeError, ImageTooLargeError, ImageEncodeError) as err:
            logger.error(f"Skipping {path}: {err}")
            failed += 1
            continue

        out_dir = Path(args.output_dir) if args.output_dir else path.parent
        out_path = image_service.save(data, out_dir / f"{path.stem}_resized.{options.extension}")
        logger.info(f"{path} → {out_path} ({result.width}x{result.height}, {len(data)} bytes)")
        processed += 1

    logger.info(f"Done: {processed} written, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
