from .fakes import FakeRenderer, chapter_page, interactive_payload, node, page

__all__ = ["FakeRenderer", "chapter_page", "interactive_payload", "node", "page"]
