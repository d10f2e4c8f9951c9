# Common utilities
from .config_loader import (
    get_supported_sites,
    load_config,
    load_env,
    load_settings,
    load_site,
    load_sites,
)
from .fetcher import FetchError, PageFetcher
from .json_utils import backup_json, read_json, write_json
from .log_config import setup_logging
from .price_utils import parse_first_price, parse_price, price_from_fields
from .text_utils import (
    absolute_url,
    clean_text,
    clean_title,
    contains_hangul,
    safe_filename,
    with_query_param,
)
