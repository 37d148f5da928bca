"""
Gateway to the NewsAPI top-headlines endpoint.
Forwards caller filters upstream and reshapes the articles it returns.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from api.exceptions import ConfigurationError, UpstreamError
from api.models import NewsArticle, NewsResponse

logger = structlog.get_logger(__name__)

DEFAULT_NEWS_API_URL = "https://newsapi.org/v2/top-headlines"


def build_params(api_key: str, query: Optional[str] = None, category: Optional[str] = None,
                 country: Optional[str] = None) -> Dict[str, str]:
    """Build upstream query parameters, leaving out filters that were not supplied."""
    params = {}
    if query:
        params["q"] = query
    if category:
        params["category"] = category
    if country:
        params["country"] = country
    params["apiKey"] = api_key
    return params


def reshape_article(article: Dict[str, Any]) -> NewsArticle:
    """Keep only the fields exposed to callers; the source collapses to its name."""
    source = article.get("source") or {}
    return NewsArticle(
        title=article.get("title"),
        description=article.get("description"),
        source=source.get("name") if isinstance(source, dict) else None,
        url=article.get("url"),
        publishedAt=article.get("publishedAt")
    )


class NewsGateway:
    """Pass-through client for the news provider."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_NEWS_API_URL,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the gateway.

        Args:
            api_key: Provider credential, required
            base_url: Full URL of the top-headlines endpoint
            client: Optional shared HTTP client; one is opened per search otherwise

        Raises:
            ConfigurationError: the credential is missing
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("NEWS_API_KEY is not set")
        self.api_key = api_key
        self.base_url = base_url
        self.client = client

    async def _get(self, params: Dict[str, str]) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(self.base_url, params=params)
        async with httpx.AsyncClient() as client:
            return await client.get(self.base_url, params=params)

    async def search(self, query: Optional[str] = None, category: Optional[str] = None,
                     country: Optional[str] = None) -> NewsResponse:
        """
        Fetch top headlines matching the supplied filters.

        Raises:
            UpstreamError: transport failure, non-success status or unreadable body
        """
        params = build_params(self.api_key, query=query, category=category, country=country)

        try:
            response = await self._get(params)
        except httpx.HTTPError as e:
            logger.error("News provider request failed", error=str(e))
            raise UpstreamError("News provider request failed") from e

        if not response.is_success:
            logger.error("News provider returned an error", status_code=response.status_code)
            raise UpstreamError(f"News provider returned status {response.status_code}")

        try:
            data = response.json()
            articles = [reshape_article(article) for article in data.get("articles") or []]
            news = NewsResponse(totalResults=data.get("totalResults") or 0, articles=articles)
        except (ValueError, AttributeError, TypeError) as e:
            logger.error("News provider returned an unreadable body", error=str(e))
            raise UpstreamError("News provider returned an unreadable body") from e

        logger.debug("Fetched news", total_results=news.totalResults, articles=len(news.articles))
        return news
