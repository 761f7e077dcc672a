"""
Face Recognition Manager
Owns the embedding provider lifecycle and applies the configured match threshold
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from core.attendance.errors import InvalidImage, NoFaceDetected
from core.attendance.records import Student
from core.recognition.matcher import MatchResult, find_best_match
from core.recognition.provider import EmbeddingProvider
from logging_config import face_recognition_logger


class FaceRecognitionManager:
    """Service wrapping the provider and the matcher"""

    def __init__(
        self,
        provider: EmbeddingProvider,
        match_threshold: float = 0.5,
        logger=None
    ):
        self.provider = provider
        self.match_threshold = float(match_threshold)
        self.logger = logger or logging.getLogger(__name__)

    def initialize(self):
        """Load the provider once (idempotent)"""
        self.provider.initialize()

    def extract_descriptor(self, image: bytes) -> List[float]:
        """
        Descriptor of the face in the captured image.
        Raises NoFaceDetected when the provider finds no face.
        """
        self.initialize()
        try:
            descriptor = self.provider.extract_descriptor(image)
        except ValueError as exc:
            # Provider could not decode the image
            raise InvalidImage(f"Invalid image: {exc}") from exc

        if descriptor is None:
            face_recognition_logger.log_recognition_error("no face detected")
            raise NoFaceDetected()

        face_recognition_logger.log_face_detected(len(descriptor))
        return descriptor

    def find_match(self, descriptor: Sequence[float], students: Sequence[Student]) -> Optional[MatchResult]:
        """Best enrolled student above the configured threshold, or None"""
        candidates = [(student.id, student.face_descriptor) for student in students]
        match = find_best_match(descriptor, candidates, self.match_threshold)
        if match is None:
            self.logger.info(
                f"[FaceRecognition] No match above threshold {self.match_threshold:.2f} "
                f"among {len(candidates)} students"
            )
        return match

    def get_stats(self) -> Dict[str, Any]:
        return {
            'provider': self.provider.name,
            'provider_ready': self.provider.is_ready,
            'match_threshold': self.match_threshold,
        }

    def close(self):
        self.provider.close()
