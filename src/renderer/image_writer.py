# renderer/image_writer.py
import os
from PIL import Image
import numpy as np

def save_image(path: str, buffer, width: int, height: int, verbose: bool = False) -> None:
    """
    Write a row-major RGB8 buffer (top row first) to an image file. The
    format follows the file extension.

    Raises:
        ValueError: If the buffer does not hold width * height * 3 bytes
        OSError: If the file cannot be written
    """
    if isinstance(buffer, (bytes, bytearray)):
        data = np.frombuffer(buffer, dtype=np.uint8)
    else:
        data = np.asarray(buffer, dtype=np.uint8)

    expected = width * height * 3
    if data.size != expected:
        raise ValueError(f"Buffer holds {data.size} bytes, expected {expected} for {width}x{height} RGB")

    directory = os.path.dirname(path)
    if directory and not os.path.isdir(directory):
        raise FileNotFoundError(f"Output directory does not exist: {directory}")

    image = Image.fromarray(data.reshape(height, width, 3))
    image.save(path)
    if verbose:
        print(f"Saved {width}x{height} image to {path}")
