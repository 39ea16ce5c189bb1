"""
Photo quality heuristics for uploaded leaf images.

Flags photos that are likely to mislead the classifier: too dark, washed
out, shadowed or too small. Each flag is computed independently from the
grayscale histogram and the image dimensions.
"""

import logging
from pathlib import Path

from PIL import Image, ImageStat, UnidentifiedImageError

from phytoscan.config import settings
from phytoscan.models.analysis import QualityReport

logger = logging.getLogger(__name__)


def assess_image(img: Image.Image) -> QualityReport:
    """Compute the four quality flags for an already opened image."""
    gray = img.convert("L")
    histogram = gray.histogram()
    total_pixels = sum(histogram) or 1

    mean_brightness = ImageStat.Stat(gray).mean[0]
    bright_ratio = sum(histogram[settings.quality_overexposed_level:]) / total_pixels
    shadow_ratio = sum(histogram[: settings.quality_shadow_level]) / total_pixels

    is_too_dark = mean_brightness < settings.quality_dark_mean
    return QualityReport(
        is_too_dark=is_too_dark,
        # Deep shadows only count as a separate issue on an otherwise lit photo
        has_shadows=not is_too_dark and shadow_ratio > settings.quality_shadow_ratio,
        is_low_res=min(img.size) < settings.quality_min_side,
        has_overexposure=bright_ratio > settings.quality_overexposed_ratio,
    )


async def analyze_image_quality(image_path: str) -> QualityReport:
    """
    Analyze a leaf photo on disk.

    Raises:
        ImageQualityError: file missing or not a readable image
    """
    path = Path(image_path)
    try:
        with Image.open(path) as img:
            report = assess_image(img)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageQualityError(f"Could not read image {image_path}") from e

    logger.info(
        "Quality check for %s: dark=%s shadows=%s low_res=%s overexposed=%s",
        path.name,
        report.is_too_dark,
        report.has_shadows,
        report.is_low_res,
        report.has_overexposure,
    )
    return report


class ImageQualityError(Exception):
    """Image could not be opened for quality analysis."""

    pass
