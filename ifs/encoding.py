"""Serialize rasters to static images and animations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Union

import imageio.v3 as iio
import numpy as np
import PIL.Image

from .pipeline import AnimationSequence

Target = Union[str, os.PathLike, BinaryIO]


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def _prepare(target: Target) -> Target:
    if isinstance(target, (str, os.PathLike)):
        path = Path(target).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)
    return target


def raster_to_image(raster: np.ndarray) -> PIL.Image.Image:
    return PIL.Image.fromarray(np.ascontiguousarray(raster))


def quantize(raster: np.ndarray, colors: int = 256) -> np.ndarray:
    """Reduce ``raster`` to an adaptive palette of at most ``colors`` entries, returned as RGB."""

    paletted = raster_to_image(raster).convert("RGB").quantize(colors=colors)
    return np.asarray(paletted.convert("RGB"))


def encode_png(raster: np.ndarray, target: Target, image_format: str = "png") -> None:
    """Write a single raster to ``target`` using the provided format."""

    image = raster_to_image(raster)
    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG":
        image = image.convert("RGB")
    image.save(_prepare(target), format=pil_format)


def encode_gif(sequence: AnimationSequence, target: Target, *, loop: int = 0) -> None:
    """Write ``sequence`` as an animated GIF, ``sequence.delay`` hundredths of a second per frame."""

    frames = np.stack([quantize(frame) for frame in sequence])
    iio.imwrite(
        _prepare(target),
        frames,
        extension=".gif",
        is_batch=True,
        duration=sequence.delay * 10,
        loop=loop,
    )


def write_frames(
    sequence: AnimationSequence,
    frame_dir: Union[str, os.PathLike],
    *,
    prefix: str = "frame",
    image_format: str = "png",
) -> list[Path]:
    """Persist each frame of ``sequence`` as a numbered image inside ``frame_dir``."""

    frame_dir = Path(frame_dir).expanduser()
    frame_dir.mkdir(parents=True, exist_ok=True)
    digits = max(3, len(str(max(len(sequence) - 1, 0))))
    written = []
    for index, frame in enumerate(sequence):
        frame_path = frame_dir / f"{prefix}{index:0{digits}d}.{image_format}"
        encode_png(frame, frame_path, image_format)
        written.append(frame_path)
    return written
