"""
FastAPI application serving the per-show feeds.

Routes:
    GET /             -- HTML index linking every known show feed
    GET /<slug>.xml   -- the show's feed document (text/xml)

Feed requests return 503 until the first snapshot is published and 404
for unknown slugs. Only GET and HEAD are allowed.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timezone
from email.utils import format_datetime, parsedate_to_datetime
from html import escape
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from feed_splitter.feeds.registry import FeedRegistry
from feed_splitter.models.entities import ShowFeed
from feed_splitter.triggers.refresh import FeedRefresher

logger = logging.getLogger(__name__)

FEED_MEDIA_TYPE = "text/xml"


def render_index(slugs: List[str]) -> str:
    """Render the index page listing the show feeds."""
    items = "".join(
        f'\n\t<li><a href="/{escape(slug)}.xml">{escape(slug)}</a></li>'
        for slug in slugs
    )
    return f"""<html>
<body>
<ul>{items}
</ul>
</body>
</html>
"""


def _not_modified(request: Request, feed: ShowFeed) -> bool:
    header = request.headers.get("if-modified-since")
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return feed.pub_date.replace(microsecond=0) <= since


def create_app(registry: FeedRegistry, refresher: Optional[FeedRefresher] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        registry: Registry the handlers read show feeds from
        refresher: Optional refresher started and stopped with the app

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if refresher is not None:
            refresher.start()
        try:
            yield
        finally:
            if refresher is not None:
                refresher.stop(timeout=refresher.timeout + 1)

    app = FastAPI(title="Feed Splitter", lifespan=lifespan)
    app.state.registry = registry

    @app.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        slugs = registry.list_slugs()
        logger.info("http request method=%s path=/ outcome=render index", request.method)
        return HTMLResponse(render_index(slugs))

    @app.api_route("/{filename}", methods=["GET", "HEAD"])
    def show_feed(filename: str, request: Request) -> Response:
        path = request.url.path
        snapshot = registry.current()
        if snapshot is None:
            logger.info(
                "http request method=%s path=%s outcome=service unavailable",
                request.method,
                path,
            )
            return PlainTextResponse("service unavailable", status_code=503)

        slug = filename[: -len(".xml")] if filename.endswith(".xml") else filename
        feed = snapshot.feeds.get(slug)
        if feed is None:
            logger.info(
                "http request method=%s path=%s outcome=feed not found show=%s",
                request.method,
                path,
                slug,
            )
            return PlainTextResponse("404 page not found", status_code=404)

        headers = {"Last-Modified": format_datetime(feed.pub_date.astimezone(timezone.utc), usegmt=True)}
        if _not_modified(request, feed):
            outcome = "not modified"
            response: Response = Response(status_code=304, headers=headers)
        else:
            outcome = "render show feed"
            response = Response(content=feed.data, media_type=FEED_MEDIA_TYPE, headers=headers)

        logger.info(
            "http request method=%s path=%s outcome=%s show=%s",
            request.method,
            path,
            outcome,
            slug,
        )
        return response

    return app
