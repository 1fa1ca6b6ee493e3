from .atcoder import AtcoderScraper
from .base import BaseScraper
from .orchestrator import ContestScraper

__all__ = ["AtcoderScraper", "BaseScraper", "ContestScraper"]
