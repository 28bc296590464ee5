import logging

from models.bounds import TargetSize

logger = logging.getLogger(__name__)


class DimensionService:
    """Output-size policy for the resample step."""

    @staticmethod
    def resolve_target_size(orig_width: int, orig_height: int,
                            req_width: int = 0, req_height: int = 0) -> TargetSize:
        """
        Resolve the final (width, height).

        • width only  → height follows the aspect ratio
        • height only → width follows the aspect ratio
        • neither     → original size
        • both        → taken verbatim, aspect ratio is the caller's business

        Derived sides are truncated toward zero and never drop below 1.
        Unset or negative requests count as 0.
        """
        if orig_width <= 0 or orig_height <= 0:
            raise ValueError(f"Original dimensions must be positive, got {orig_width}x{orig_height}")

        req_width = max(0, req_width or 0)
        req_height = max(0, req_height or 0)

        if req_width > 0 and req_height == 0:
            width, height = req_width, int(float(orig_height) * req_width / orig_width)
        elif req_height > 0 and req_width == 0:
            width, height = int(float(orig_width) * req_height / orig_height), req_height
        elif req_width == 0 and req_height == 0:
            width, height = orig_width, orig_height
        else:
            width, height = req_width, req_height

        target = TargetSize(max(1, width), max(1, height))
        logger.debug(f"Target size {orig_width}x{orig_height} (requested {req_width}x{req_height}) → {target.width}x{target.height}")
        return target
