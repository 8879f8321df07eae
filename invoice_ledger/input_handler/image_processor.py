"""
Image Processor Module.

This module prepares photographed or scanned invoices for the extraction
service:
    - Image loading and validation
    - Orientation correction from EXIF data
    - Conversion to RGB
    - Downscaling of oversized images

Supports: PNG, JPG, JPEG, WEBP

Author: ML Engineering Team
"""

import io
from typing import Tuple, Dict, Any

from PIL import Image, ImageOps

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class ImageProcessor:
    """
    Processor for image files (PNG, JPG, JPEG, WEBP).

    Images that need no correction are passed through byte for byte.
    Otherwise the corrected image is re-encoded in its original format
    (PNG for anything else).

    Attributes:
        max_width: Maximum image width in pixels
        max_height: Maximum image height in pixels
        auto_orient: Whether to auto-correct orientation

    Example:
        >>> processor = ImageProcessor()
        >>> data, mime_type, metadata = processor.process(jpg_bytes, "invoice.jpg")
    """

    # PIL format name -> MIME type
    FORMAT_MIME_TYPES = {
        'JPEG': 'image/jpeg',
        'PNG': 'image/png',
        'WEBP': 'image/webp',
    }

    EXIF_ORIENTATION = 0x0112

    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.max_width = get_config("input.image.max_width", 2480)
        self.max_height = get_config("input.image.max_height", 3508)
        self.auto_orient = get_config("input.image.auto_orient", True)

        logger.debug(
            f"ImageProcessor initialized (max_size={self.max_width}x{self.max_height})"
        )

    def process(self, data: bytes, filename: str) -> Tuple[bytes, str, Dict[str, Any]]:
        """
        Process an image for extraction.

        Args:
            data: Raw image bytes.
            filename: Original filename, for messages and metadata.

        Returns:
            Tuple of (image bytes, MIME type, metadata dictionary).

        Raises:
            CorruptedFileError: If the image cannot be read.
        """
        logger.info(f"Processing image: {filename}")

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except Exception as e:
            logger.error(f"Failed to open image {filename}: {e}")
            raise CorruptedFileError(filename, str(e))

        source_format = image.format
        metadata = self._extract_metadata(filename, image, len(data))

        processed = self._process_image(image)

        if processed is image and source_format in self.FORMAT_MIME_TYPES:
            metadata['processed_width'] = image.width
            metadata['processed_height'] = image.height
            return data, self.FORMAT_MIME_TYPES[source_format], metadata

        output_format = source_format if source_format in self.FORMAT_MIME_TYPES else 'PNG'
        buffer = io.BytesIO()
        processed.save(buffer, format=output_format)

        metadata['processed_width'] = processed.width
        metadata['processed_height'] = processed.height
        metadata['reencoded'] = True

        logger.info(
            f"Processed image: {processed.width}x{processed.height} "
            f"(original: {metadata['original_width']}x{metadata['original_height']})"
        )
        return buffer.getvalue(), self.FORMAT_MIME_TYPES[output_format], metadata

    def _process_image(self, image: Image.Image) -> Image.Image:
        """
        Apply the processing pipeline to an image.

        Processing steps:
            1. Fix orientation from EXIF data
            2. Convert to RGB
            3. Resize if too large

        Returns:
            The same object if nothing changed, otherwise a new image.
        """
        if self.auto_orient and image.getexif().get(self.EXIF_ORIENTATION, 1) != 1:
            image = ImageOps.exif_transpose(image)
            logger.debug("Fixed image orientation from EXIF")

        image = self._convert_to_rgb(image)
        image = self._resize_if_needed(image)
        return image

    def _convert_to_rgb(self, image: Image.Image) -> Image.Image:
        """
        Convert image to RGB mode.

        Transparent areas are flattened onto a white background.
        """
        if image.mode == 'RGB':
            return image

        original_mode = image.mode

        if image.mode in ('RGBA', 'LA') or (image.mode == 'P' and 'transparency' in image.info):
            rgba = image.convert('RGBA')
            background = Image.new('RGB', rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[3])
            image = background
        else:
            image = image.convert('RGB')

        logger.debug(f"Converted image from {original_mode} to RGB")
        return image

    def _resize_if_needed(self, image: Image.Image) -> Image.Image:
        """
        Resize image if it exceeds maximum dimensions, keeping aspect ratio.
        """
        width, height = image.size

        if width <= self.max_width and height <= self.max_height:
            return image

        ratio = min(self.max_width / width, self.max_height / height)
        new_size = (int(width * ratio), int(height * ratio))

        image = image.resize(new_size, Image.LANCZOS)

        logger.debug(f"Resized image from {width}x{height} to {new_size[0]}x{new_size[1]}")
        return image

    def _extract_metadata(
        self,
        filename: str,
        image: Image.Image,
        size: int
    ) -> Dict[str, Any]:
        return {
            'original_filename': filename,
            'file_size_bytes': size,
            'file_type': 'image',
            'original_width': image.width,
            'original_height': image.height,
            'original_mode': image.mode,
            'format': image.format,
            'page_count': 1
        }
