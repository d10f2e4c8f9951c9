"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Listing prices outside this range are review counts, option codes or typos
PRICE_MIN_KRW = 1_000
PRICE_MAX_KRW = 100_000_000

DEFAULT_CATEGORY = "기타"

# Merged per-brand file; never treated as a category file
MERGED_PRODUCTS_FILE = "products.json"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "ko-KR,ko;q=0.9,en;q=0.8"

# Replicate andreasjansson/clip-features (ViT-L/14)
CLIP_MODEL_VERSION = "75b33f253f7714a281ad3e9b28f63e3232d583716ef6718f2e46641077ea040a"
CLIP_EMBEDDING_DIM = 768

# Image URL substrings that never point at product photos
DEFAULT_IMAGE_EXCLUDE = ("icon", "badge", "logo", "btn_")
