"""Embedding providers.

Turns a captured still image into a face descriptor. The provider is an
explicitly constructed service with its own lifecycle: callers invoke
``initialize()`` before extracting and ``close()`` on shutdown.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class EmbeddingProvider:
    """Base class for duck-typed providers."""

    name: str = "provider"

    def __init__(self) -> None:
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load model state once; later calls are no-ops."""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            self._load()
            self._initialized = True
            logger.info("[Provider] %s initialized", self.name)

    def extract_descriptor(self, image: bytes) -> Optional[List[float]]:
        """Return the descriptor of the first face found, or None."""
        if not self._initialized:
            raise RuntimeError("Face recognition service not initialized")
        return self._extract(image)

    def close(self) -> None:
        if not self._initialized:
            return
        self._release()
        self._initialized = False
        logger.info("[Provider] %s closed", self.name)

    def _load(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def _extract(self, image: bytes) -> Optional[List[float]]:  # pragma: no cover - interface
        raise NotImplementedError

    def _release(self) -> None:
        pass


def decode_image(image: bytes) -> np.ndarray:
    """Decode encoded image bytes (JPEG/PNG/WEBP) into an RGB array."""
    buffer = np.frombuffer(image, dtype=np.uint8)
    frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if frame is None:
        raise ValueError("Unable to decode image data")
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


class FaceRecognitionProvider(EmbeddingProvider):
    """dlib-based 128-d descriptors through the ``face_recognition`` package."""

    name = "face_recognition"

    def __init__(self, detection_model: str = "hog", num_jitters: int = 1, upsample: int = 1):
        super().__init__()
        self.detection_model = detection_model
        self.num_jitters = max(1, int(num_jitters))
        self.upsample = max(0, int(upsample))
        self._lib = None

    def _load(self) -> None:
        # Importing face_recognition loads the dlib models, so it is deferred
        # until the first workflow actually needs a descriptor.
        import face_recognition

        self._lib = face_recognition

    def _extract(self, image: bytes) -> Optional[List[float]]:
        rgb = decode_image(image)

        locations = self._lib.face_locations(
            rgb,
            number_of_times_to_upsample=self.upsample,
            model=self.detection_model,
        )
        if not locations:
            logger.debug("[Provider] No face located in %sx%s image", rgb.shape[1], rgb.shape[0])
            return None

        encodings = self._lib.face_encodings(
            rgb,
            known_face_locations=locations[:1],
            num_jitters=self.num_jitters,
        )
        if not encodings:
            return None
        return [float(v) for v in encodings[0]]

    def _release(self) -> None:
        self._lib = None
