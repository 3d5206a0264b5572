"""Visual recognition client (Clarifai v2 REST API).

Usage:
    client = VisualRecognitionClient(api_key="...", image_base_url="https://cdn.example.com")
    detection = await client.detect_visual_concepts("uploads/front-oil-bottle.jpg")
    detection.status       # DetectionStatus.DETECTED
    detection.concepts[0]  # VisualConcept(name='bottle', confidence=0.97)
"""

from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from catalog_verifier.clients.base_client import BaseAsyncHTTPClient
from catalog_verifier.logging_config import get_logger
from catalog_verifier.schemas.image import ConceptDetection, VisualConcept

logger = get_logger(__name__)


@runtime_checkable
class ConceptDetector(Protocol):
    """Anything that can list the visual concepts in an image."""

    async def detect_visual_concepts(self, image_ref: str) -> ConceptDetection:
        ...


class VisualRecognitionClient(BaseAsyncHTTPClient):
    """Detects visual concepts with a Clarifai model.

    Never raises for service problems: HTTP errors, timeouts and malformed
    responses all come back as ``ConceptDetection(status=unavailable)``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.clarifai.com/v2",
        model_id: str = "general-image-recognition",
        image_base_url: str = "",
        min_concept_confidence: float = 0.6,
        timeout: float = 10.0,
        retry_max_attempts: int = 3,
        retry_initial_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            retry_max_attempts=retry_max_attempts,
            retry_initial_delay=retry_initial_delay,
            transport=transport,
        )
        self.model_id = model_id
        self.image_base_url = image_base_url.rstrip("/")
        self.min_concept_confidence = min_concept_confidence

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Key {self.api_key}"
        return headers

    def resolve_image_url(self, image_ref: str) -> str:
        """Absolute URL for an image path; relative paths join ``image_base_url``.

        Examples:
            >>> c = VisualRecognitionClient("k", image_base_url="https://cdn.example.com/")
            >>> c.resolve_image_url("\\\\uploads\\\\oil.jpg")
            'https://cdn.example.com/uploads/oil.jpg'
            >>> c.resolve_image_url("https://img.example.com/a.png")
            'https://img.example.com/a.png'
        """
        ref = image_ref.strip()
        if ref.startswith(("http://", "https://")):
            return ref
        path = ref.replace("\\", "/").lstrip("/")
        if not self.image_base_url:
            return path
        return f"{self.image_base_url}/{path}"

    # ── public API ───────────────────────────────────────────────────

    async def detect_visual_concepts(self, image_ref: str) -> ConceptDetection:
        url = self.resolve_image_url(image_ref)
        payload = {"inputs": [{"data": {"image": {"url": url}}}]}

        try:
            data = await self._post(f"models/{self.model_id}/outputs", payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("recognition_call_failed", image=url, error=str(exc))
            return ConceptDetection.unavailable(f"{type(exc).__name__}: {exc}")

        if data is None:
            logger.warning("recognition_call_rejected", image=url)
            return ConceptDetection.unavailable("Recognition service rejected the request")

        concepts = self._parse_concepts(data)
        if concepts is None:
            logger.warning("recognition_response_malformed", image=url)
            return ConceptDetection.unavailable("Malformed recognition response")

        logger.debug("recognition_call_completed", image=url, concepts=len(concepts))
        return ConceptDetection.detected(concepts)

    def _parse_concepts(self, data: Any) -> Optional[list[VisualConcept]]:
        """Concepts above the confidence floor, or None if the payload is not understood."""
        try:
            raw = data["outputs"][0]["data"].get("concepts", [])
        except (KeyError, IndexError, TypeError, AttributeError):
            return None

        concepts = []
        for item in raw or []:
            if not isinstance(item, dict):
                continue
            name, value = item.get("name"), item.get("value")
            if not name or not isinstance(value, (int, float)):
                continue
            if value > self.min_concept_confidence:
                concepts.append(VisualConcept(name=str(name), confidence=min(1.0, float(value))))
        return concepts
