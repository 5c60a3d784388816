"""
Unit tests for the static HTML renderer.
"""

import httpx
import pytest
from starmark.errors import RenderFailed
from starmark.extractor import extract_page
from starmark.renderer import SoupRenderer, parse_html

READER_HTML = """
<html>
  <body>
    <img src="/img/page1.jpg">
    <img src="https://x.com/img/loading.gif" data-src="https://cdn.x.com/page2.png">
    <a href="/">Home</a>
    <a class="btn next" href="/ch/3" title="Next">  Next Chapter  </a>
    <div style="color: red; cursor: Pointer">Menu</div>
    <select name="server"><option value="a">A</option><option value="b" selected>B</option></select>
    <textarea name="comment">hello</textarea>
    <p>Body text</p>
  </body>
</html>
"""

RENDER_ARGS = {"timeout_ms": 1000, "settle_ms": 0, "blocked_resource_types": ()}


class TestParseHtml:
    def test_images_resolve_relative_src(self):
        page = parse_html(READER_HTML, "https://x.com/ch/2")

        assert page.images[0].src == "https://x.com/img/page1.jpg"
        assert page.images[1].data_src == "https://cdn.x.com/page2.png"

    def test_nodes_in_document_order(self):
        page = parse_html(READER_HTML, "https://x.com/ch/2")

        tags = [n.tag for n in page.nodes]
        assert tags[:3] == ["html", "body", "img"]
        assert tags.index("a") < tags.index("div") < tags.index("select")

    def test_class_list_joined_and_text_trimmed(self):
        page = parse_html(READER_HTML, "https://x.com/ch/2")

        link = next(n for n in page.nodes if n.class_name)
        assert link.class_name == "btn next"
        assert link.attributes["class"] == "btn next"
        assert link.text == "Next Chapter"

    def test_inline_cursor(self):
        page = parse_html(READER_HTML, "https://x.com/ch/2")

        div = next(n for n in page.nodes if n.tag == "div")
        assert div.inline_cursor == "pointer"
        assert div.computed_cursor == ""

    def test_form_values(self):
        page = parse_html(READER_HTML, "https://x.com/ch/2")

        select = next(n for n in page.nodes if n.tag == "select")
        textarea = next(n for n in page.nodes if n.tag == "textarea")
        assert select.value == "b"
        assert textarea.value == "hello"

    def test_extraction_over_parsed_page(self):
        result = extract_page(parse_html(READER_HTML, "https://x.com/ch/2"))

        assert [img.url for img in result.images] == [
            "https://x.com/img/page1.jpg",
            "https://cdn.x.com/page2.png",
        ]
        assert [e.tag for e in result.interactive] == ["a", "a", "div", "select", "textarea"]


class TestSoupRenderer:
    @pytest.mark.asyncio
    async def test_fetches_and_parses(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=READER_HTML)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            renderer = SoupRenderer(client=client, user_agent="starmark-test")
            page = await renderer.render("https://x.com/ch/2", **RENDER_ARGS)

        assert page.url == "https://x.com/ch/2"
        assert len(page.images) == 2
        assert seen[0].headers["User-Agent"] == "starmark-test"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404, text="missing"))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(RenderFailed, match="HTTP 404"):
                await SoupRenderer(client=client).render("https://x.com/gone", **RENDER_ARGS)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RenderFailed, match="navigation timeout after 1000ms"):
                await SoupRenderer(client=client).render("https://x.com/slow", **RENDER_ARGS)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RenderFailed, match="connection refused"):
                await SoupRenderer(client=client).render("https://x.com", **RENDER_ARGS)
