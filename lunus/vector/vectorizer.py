"""
Product Vectorizer

Uploads unified products to Supabase and stores a CLIP image embedding
for each of them, with a progress file so long runs can be resumed.
"""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime
from typing import Any

import requests

from ..common.json_utils import write_json
from ..models import ScrapedProduct
from .embedder import ClipEmbedder, EmbeddingError
from .supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class ProductVectorizer:
    """Upload and embedding pipeline for the products table."""

    def __init__(
        self,
        client: SupabaseClient,
        embedder: ClipEmbedder | None = None,
        table: str = "products",
        source_tag: str = "premium-crawler",
        batch_size: int = 100,
        save_every: int = 10,
        embed_delay: float = 0.5,
        progress_file: str | None = None,
        match_function: str = "match_products_by_image",
        match_threshold: float = 0.5,
        match_count: int = 10,
    ):
        """
        Initialize the vectorizer.

        Args:
            client: Supabase REST client
            embedder: CLIP embedder (required for vectorize/find_similar)
            table: Products table name
            source_tag: Value written to the `source` column
            batch_size: Rows per upsert request
            save_every: Write progress after this many successes
            embed_delay: Seconds between products
            progress_file: JSON progress file for resume (None = no resume)
            match_function: Similarity search database function
            match_threshold: Default similarity threshold
            match_count: Default number of matches
        """
        self.client = client
        self.embedder = embedder
        self.table = table
        self.source_tag = source_tag
        self.batch_size = batch_size
        self.save_every = save_every
        self.embed_delay = embed_delay
        self.progress_file = progress_file
        self.match_function = match_function
        self.match_threshold = match_threshold
        self.match_count = match_count

        self.processed_ids: set[str] = set()
        self.completed = 0
        self.last_error: dict | None = None

    @classmethod
    def from_settings(
        cls,
        settings: dict[str, Any],
        client: SupabaseClient,
        embedder: ClipEmbedder | None = None,
    ) -> "ProductVectorizer":
        """Create a vectorizer from the `vector` and `paths` blocks of settings.yaml."""
        vector = settings.get("vector", {})
        paths = settings.get("paths", {})
        return cls(
            client,
            embedder,
            table=vector.get("table", "products"),
            source_tag=vector.get("source_tag", "premium-crawler"),
            batch_size=vector.get("batch_size", 100),
            save_every=vector.get("save_every", 10),
            embed_delay=vector.get("embed_delay", 0.5),
            progress_file=paths.get("vector_progress_file"),
            match_function=vector.get("match_function", "match_products_by_image"),
            match_threshold=vector.get("match_threshold", 0.5),
            match_count=vector.get("match_count", 10),
        )

    def to_row(self, product: ScrapedProduct) -> dict[str, Any]:
        """Table row for a product; the product URL doubles as primary key."""
        return {
            "id": product.product_url,
            "brand": product.brand,
            "title": product.title,
            "category": product.category,
            "price": product.price,
            "image_url": product.image_url or None,
            "url": product.product_url,
            "source": self.source_tag,
        }

    # ── Upload ────────────────────────────────────────────────────────────────

    def upload_products(self, products: list[ScrapedProduct]) -> dict[str, int]:
        """
        Upsert all products in batches.

        Rows sharing an id collapse to the last one; an upsert batch may
        touch each conflict key only once.

        Returns:
            Dict with uploaded row count and failed batch count
        """
        rows_by_id: dict[str, dict[str, Any]] = {}
        for product in products:
            row = self.to_row(product)
            rows_by_id.pop(row["id"], None)
            rows_by_id[row["id"]] = row
        rows = list(rows_by_id.values())
        if len(rows) < len(products):
            logger.info("Dropped %d duplicate products", len(products) - len(rows))
        uploaded = 0
        failed_batches = 0

        for start in range(0, len(rows), self.batch_size):
            batch = rows[start:start + self.batch_size]
            if self.client.upsert(self.table, batch, on_conflict="id"):
                uploaded += len(batch)
                logger.info("Uploaded %d/%d", uploaded, len(rows))
            else:
                failed_batches += 1
                logger.error("Batch upload failed (%d-%d)", start, start + len(batch))

        return {"uploaded": uploaded, "failed_batches": failed_batches}

    # ── Progress ──────────────────────────────────────────────────────────────

    def load_progress(self) -> bool:
        """Load previous progress for resume."""
        if not self.progress_file or not os.path.exists(self.progress_file):
            return False
        try:
            with open(self.progress_file, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load progress: %s", e)
            return False

        self.processed_ids = set(state.get("processedIds", []))
        self.completed = state.get("completed", 0)
        logger.info("Loaded progress: %d completed, %d processed",
                    self.completed, len(self.processed_ids))
        return True

    def save_progress(self, finished: bool = False) -> None:
        """Save current progress."""
        if not self.progress_file:
            return
        state: dict[str, Any] = {
            "completed": self.completed,
            "processedIds": sorted(self.processed_ids),
            "lastUpdated": datetime.now().isoformat(),
        }
        if self.last_error:
            state["lastError"] = self.last_error
        if finished:
            state["finished"] = True
            state["finishedAt"] = datetime.now().isoformat()
        write_json(self.progress_file, state)

    # ── Embedding ─────────────────────────────────────────────────────────────

    def vectorize(
        self,
        products: list[ScrapedProduct],
        limit: int = 0,
        resume: bool = True,
    ) -> dict[str, int]:
        """
        Embed each product image and store it in `image_embedding`.

        Failed products are recorded as processed too, so a resumed run
        does not retry them.

        Returns:
            Dict with succeeded, failed and skipped counts
        """
        if self.embedder is None:
            raise ValueError("An embedder is required to vectorize products")

        if resume:
            self.load_progress()

        pending = []
        queued: set[str] = set()
        for product in products:
            if product.product_url in self.processed_ids or product.product_url in queued:
                continue
            queued.add(product.product_url)
            pending.append(product)
        skipped = len(products) - len(pending)
        if limit > 0:
            pending = pending[:limit]

        succeeded = 0
        failed = 0
        for i, product in enumerate(pending, 1):
            logger.info("[%d/%d] %s - %s", i, len(pending), product.brand, product.title[:50])
            try:
                embedding = self.embedder.embed_image(product.image_url)
                if not self.client.update(self.table, {"image_embedding": embedding},
                                          "id", product.product_url):
                    raise EmbeddingError("saving embedding failed")
            except (EmbeddingError, requests.RequestException) as e:
                failed += 1
                self.processed_ids.add(product.product_url)
                self.last_error = {
                    "product": product.title,
                    "error": str(e),
                    "time": datetime.now().isoformat(),
                }
                logger.error("Failed: %s", e)
                self.save_progress()
                continue

            succeeded += 1
            self.completed += 1
            self.processed_ids.add(product.product_url)
            if succeeded % self.save_every == 0:
                self.save_progress()

            if i < len(pending) and self.embed_delay:
                time.sleep(self.embed_delay)

        self.save_progress(finished=True)
        return {"succeeded": succeeded, "failed": failed, "skipped": skipped}

    def find_similar(
        self,
        image_url: str,
        threshold: float | None = None,
        count: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Find products whose image embedding is close to an image.

        Raises:
            EmbeddingError: If the query image cannot be embedded
        """
        if self.embedder is None:
            raise ValueError("An embedder is required for similarity search")

        embedding = self.embedder.embed_image(image_url)
        result = self.client.rpc(self.match_function, {
            "query_embedding": embedding,
            "match_threshold": self.match_threshold if threshold is None else threshold,
            "match_count": self.match_count if count is None else count,
        })
        return result or []

    @staticmethod
    def print_summary(upload: dict[str, int] | None, vectorized: dict[str, int] | None) -> None:
        """Print vectorization summary."""
        print("\n" + "=" * 60)
        print("Vectorization Summary")
        print("=" * 60)
        if upload is not None:
            print(f"  Uploaded rows:      {upload['uploaded']}")
            print(f"  Failed batches:     {upload['failed_batches']}")
        if vectorized is not None:
            print(f"  Embedded:           {vectorized['succeeded']}")
            print(f"  Failed:             {vectorized['failed']}")
            print(f"  Skipped (done):     {vectorized['skipped']}")
        print("=" * 60)
