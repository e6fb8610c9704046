# =============================================================================
# core/trends.py  -  Trending-topic collection across platforms
# =============================================================================
#
# TrendScraper asks one source per requested platform for topic strings and
# merges the answers.  A source that raises is logged and skipped: one dead
# platform never fails the whole fetch.  The merged list is de-duplicated,
# keeping the order in which topics were first seen.
#
# Sources:
#   youtube        trending page must be reachable, topics derived from niche
#   twitter        derived from niche (no API access)
#   reddit         hot post titles from r/<niche>
#   google-trends  derived search-style phrases
#   tiktok         no source; contributes nothing
# =============================================================================

from typing import Awaitable, Callable, Iterable, Optional

import httpx

TrendSource = Callable[[str], Awaitable[list[str]]]

_BROWSER_HEADERS = {"User-Agent": "Mozilla/5.0"}


class HttpTrendSources:
    """Network-backed sources sharing one timeout (and, in tests, one transport)."""

    youtube_url = "https://www.youtube.com/feed/trending"
    reddit_url = "https://www.reddit.com/r/{niche}/hot.json"

    def __init__(self, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport, headers=_BROWSER_HEADERS)

    async def youtube(self, niche: str) -> list[str]:
        async with self._client() as client:
            response = await client.get(self.youtube_url, params={"bp": "wgYCCAESAhAB"})
            response.raise_for_status()
        return [f"{niche} tutorial", f"{niche} 2025", f"best {niche}"]

    async def reddit(self, niche: str) -> list[str]:
        async with self._client() as client:
            response = await client.get(self.reddit_url.format(niche=niche), params={"limit": 10})
            response.raise_for_status()
            posts = response.json().get("data", {}).get("children", [])
        return [post["data"]["title"].lower() for post in posts if post.get("data", {}).get("title")]


async def twitter_topics(niche: str) -> list[str]:
    return [f"#{niche}", f"{niche} tips", f"{niche} secrets"]


async def google_trends_topics(niche: str) -> list[str]:
    return [f"how to {niche}", f"{niche} for beginners", f"{niche} vs", f"{niche} mistakes"]


class TrendScraper:
    def __init__(self, sources: dict[str, TrendSource]):
        self.sources = sources

    @classmethod
    def default(cls, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TrendScraper":
        http = HttpTrendSources(timeout, transport)
        return cls({
            "youtube": http.youtube,
            "twitter": twitter_topics,
            "reddit": http.reddit,
            "google-trends": google_trends_topics,
        })

    async def fetch(self, niche: str, platforms: Iterable[str], log) -> list[str]:
        """Merged, de-duplicated topics for ``niche`` from each platform in order."""
        topics: list[str] = []
        for platform in platforms:
            source = self.sources.get(platform)
            if source is None:
                log.debug("No trend source for platform", meta={"platform": platform})
                continue
            try:
                found = await source(niche)
            except Exception as exc:
                log.warning(f"{platform} scraping failed", meta={"niche": niche, "error": repr(exc)})
                continue
            log.info(f"Scraped {platform} trends", meta={"niche": niche, "count": len(found)})
            topics.extend(found)
        return list(dict.fromkeys(topics))
