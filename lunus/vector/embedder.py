"""
CLIP Image Embedder

Computes image embeddings with the CLIP features model hosted on
Replicate, through its predictions HTTP API.
"""

import logging
import os
import time
from typing import Any, Dict, List

import requests

from ..common.constants import CLIP_EMBEDDING_DIM, CLIP_MODEL_VERSION

logger = logging.getLogger(__name__)


class EmbeddingError(Exception):
    """Raised when an embedding cannot be computed."""


class ClipEmbedder:
    """
    Replicate CLIP client.

    Usage:
        embedder = ClipEmbedder.from_env()
        vector = embedder.embed_image("https://.../product.jpg")   # 768 floats
    """

    API_URL = "https://api.replicate.com/v1/predictions"
    TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}

    def __init__(
        self,
        api_token: str,
        version: str = CLIP_MODEL_VERSION,
        dimension: int = CLIP_EMBEDDING_DIM,
        attempts: int = 3,
        poll_interval: float = 1.0,
        timeout: float = 120.0,
    ):
        """
        Initialize the embedder.

        Args:
            api_token: Replicate API token
            version: Model version hash
            dimension: Expected embedding length
            attempts: Attempts per image
            poll_interval: Seconds between prediction status polls
            timeout: Seconds to wait for one prediction
        """
        self.version = version
        self.dimension = dimension
        self.attempts = attempts
        self.poll_interval = poll_interval
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_env(cls, **kwargs) -> "ClipEmbedder":
        """
        Create an embedder from REPLICATE_API_TOKEN.

        Raises:
            ValueError: If the token is not set
        """
        token = os.environ.get("REPLICATE_API_TOKEN")
        if not token:
            raise ValueError("REPLICATE_API_TOKEN is not set")
        return cls(token, **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def embed_image(self, image_url: str) -> List[float]:
        """
        Embed one image, retrying with a growing delay.

        Raises:
            EmbeddingError: When every attempt fails
        """
        if not image_url:
            raise EmbeddingError("no image URL")

        last_error = ""
        for attempt in range(1, self.attempts + 1):
            try:
                prediction = self._create_prediction(image_url)
                prediction = self._wait(prediction)
                return self.parse_output(prediction.get("output"))
            except (EmbeddingError, requests.RequestException, ValueError) as e:
                last_error = str(e)
                if attempt < self.attempts:
                    logger.warning("Retry %d/%d for %s: %s", attempt, self.attempts, image_url, e)
                    time.sleep(2 * attempt)

        raise EmbeddingError(f"{image_url}: {last_error}")

    def parse_output(self, output: Any) -> List[float]:
        """
        Extract the embedding from model output.

        Accepts [{"embedding": [...]}], {"embedding": [...]} or a flat list.

        Raises:
            EmbeddingError: On unknown shape or wrong dimension
        """
        embedding = None
        if isinstance(output, list) and output:
            first = output[0]
            if isinstance(first, dict) and isinstance(first.get("embedding"), list):
                embedding = first["embedding"]
            elif isinstance(first, (int, float)):
                embedding = output
        elif isinstance(output, dict) and isinstance(output.get("embedding"), list):
            embedding = output["embedding"]

        if embedding is None:
            raise EmbeddingError(f"Unexpected model output: {str(output)[:100]}")
        if len(embedding) != self.dimension:
            raise EmbeddingError(
                f"Invalid embedding dimension: {len(embedding)} (expected {self.dimension})"
            )
        return [float(v) for v in embedding]

    def _create_prediction(self, image_url: str) -> Dict[str, Any]:
        response = self.session.post(
            self.API_URL,
            json={"version": self.version, "input": {"inputs": image_url}},
            headers={"Prefer": "wait"},
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            raise EmbeddingError(f"HTTP {response.status_code}: {response.text[:200]}")
        return response.json()

    def _wait(self, prediction: Dict[str, Any]) -> Dict[str, Any]:
        """Poll a prediction until it reaches a terminal status."""
        deadline = time.time() + self.timeout

        while prediction.get("status") not in self.TERMINAL_STATUSES:
            if time.time() > deadline:
                raise EmbeddingError(f"Prediction {prediction.get('id')} timed out")
            get_url = (prediction.get("urls") or {}).get("get")
            if not get_url:
                raise EmbeddingError("Prediction has no status URL")
            time.sleep(self.poll_interval)
            response = self.session.get(get_url, timeout=self.timeout)
            if response.status_code >= 400:
                raise EmbeddingError(f"HTTP {response.status_code} polling prediction")
            prediction = response.json()

        if prediction["status"] != "succeeded":
            raise EmbeddingError(
                f"Prediction {prediction['status']}: {prediction.get('error') or 'no details'}"
            )
        return prediction
