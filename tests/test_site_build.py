"""Tests for page rendering and the site build."""

from __future__ import annotations

import tempfile
import unittest
from datetime import date
from pathlib import Path

from blogsite.content.frontmatter import FrontMatter
from blogsite.content.store import ContentError, Document
from blogsite import __version__
from blogsite.config import SCHEMA_VERSION
from blogsite.site.build import build_site, render_document, render_index, sort_for_index
from blogsite.site.styles import CSS


def _doc(doc_id: str, title: str, updated: date, body: str = "", **meta) -> Document:
    return Document(id=doc_id, meta=FrontMatter(title=title, updated=updated, **meta), body=body)


def _write(root: Path, name: str, text: str) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / name).write_text(text, encoding="utf-8")


class TestRenderDocument(unittest.TestCase):
    def test_empty_body_renders(self) -> None:
        html = render_document(_doc("empty", "Nothing Yet", date(2022, 1, 1)))
        self.assertIn("<h1>Nothing Yet</h1>", html)
        self.assertIn("Updated 2022-01-01", html)
        self.assertIn("no text", html)
        self.assertTrue(html.endswith("</html>\n"))

    def test_page_embeds_stylesheet_and_logo(self) -> None:
        html = render_document(_doc("a", "A", date(2022, 1, 1), body="text"), base_url="")
        self.assertIn(f"<style>{CSS}</style>", html)
        self.assertNotIn('rel="stylesheet"', html)
        self.assertIn('class="logo"', html)
        self.assertIn('href="../../index.html"', html)

    def test_base_url_makes_site_links_absolute(self) -> None:
        doc = _doc("a", "A", date(2022, 1, 1), body="[local](#x)")
        html = render_document(doc, base_url="https://blog.example/")
        self.assertIn('<a class="logo" href="https://blog.example/index.html">', html)
        self.assertNotIn("../../", html)
        self.assertIn('href="#x"', html)

        index = render_index([doc], base_url="https://blog.example")
        self.assertIn('href="https://blog.example/posts/a/index.html"', index)

    def test_generator_meta_names_version_and_layout(self) -> None:
        html = render_document(_doc("a", "A", date(2022, 1, 1)))
        self.assertIn(
            f'<meta name="generator" content="blogsite {__version__} (layout {SCHEMA_VERSION})">',
            html,
        )

    def test_title_is_escaped(self) -> None:
        html = render_document(_doc("x", "<b>Generics</b> & you", date(2022, 1, 1)))
        self.assertIn("&lt;b&gt;Generics&lt;/b&gt; &amp; you", html)
        self.assertNotIn("<b>Generics", html)

    def test_table_of_contents_for_multiple_headings(self) -> None:
        body = "## First\n\ntext\n\n## Second\n\ntext\n"
        html = render_document(_doc("t", "T", date(2022, 1, 1), body=body))
        self.assertIn('<nav class="toc">', html)
        self.assertIn('href="#first"', html)
        self.assertIn('<h2 id="second">Second</h2>', html)

    def test_dateline_shows_published_when_different(self) -> None:
        doc = _doc("p", "P", date(2022, 3, 7), published=date(2022, 3, 1), tags=("java",))
        html = render_document(doc)
        self.assertIn("Published 2022-03-01 · Updated 2022-03-07", html)
        self.assertIn("tags: java", html)


class TestSortForIndex(unittest.TestCase):
    def test_newest_first_ties_by_id(self) -> None:
        docs = [
            _doc("b", "B", date(2022, 1, 1)),
            _doc("c", "C", date(2023, 1, 1)),
            _doc("a", "A", date(2022, 1, 1)),
        ]
        self.assertEqual([d.id for d in sort_for_index(docs)], ["c", "a", "b"])


class TestBuildSite(unittest.TestCase):
    def test_build_writes_pages_and_skips_drafts(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            content = Path(td) / "content"
            out = Path(td) / "public"
            _write(
                content,
                "2022-03-07-java.md",
                '+++\ntitle = "Use .join()/.get() Judiciously in Java Async Chains"\n'
                "updated = 2022-03-07\n+++\n\n## Compose\n\nUse `thenCompose`.\n",
            )
            _write(content, "2023-01-01-draft.md", '+++\ntitle = "Draft"\nupdated = 2023-01-01\ndraft = true\n+++\n')

            report = build_site(content, out, base_url="")
            self.assertEqual(report.schema_version, SCHEMA_VERSION)
            self.assertEqual(report.documents, 1)
            self.assertEqual(report.drafts_skipped, 1)
            self.assertEqual(report.pages, ["posts/2022-03-07-java/index.html", "index.html"])
            self.assertTrue((out / "index.html").exists())
            self.assertFalse((out / "style.css").exists())

            page = (out / "posts" / "2022-03-07-java" / "index.html").read_text(encoding="utf-8")
            self.assertIn("Use .join()/.get() Judiciously in Java Async Chains", page)
            self.assertIn("<code>thenCompose</code>", page)

            index = (out / "index.html").read_text(encoding="utf-8")
            self.assertIn('href="posts/2022-03-07-java/index.html"', index)
            self.assertNotIn("Draft", index)

            report = build_site(content, out, include_drafts=True)
            self.assertEqual(report.documents, 2)
            self.assertTrue((out / "posts" / "2023-01-01-draft" / "index.html").exists())

    def test_build_is_byte_stable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            content = Path(td) / "content"
            _write(content, "a.md", '+++\ntitle = "A"\nupdated = 2022-01-01\n+++\n\nBody\n')
            _write(content, "b.md", '+++\ntitle = "B"\nupdated = 2022-02-01\n+++\n')

            build_site(content, Path(td) / "one")
            build_site(content, Path(td) / "two")
            for rel in ["index.html", "posts/a/index.html", "posts/b/index.html"]:
                with self.subTest(page=rel):
                    self.assertEqual(
                        (Path(td) / "one" / rel).read_bytes(),
                        (Path(td) / "two" / rel).read_bytes(),
                    )

    def test_rebuild_removes_stale_posts(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            content = Path(td) / "content"
            out = Path(td) / "public"
            _write(content, "a.md", '+++\ntitle = "A"\nupdated = 2022-01-01\n+++\n')
            _write(content, "b.md", '+++\ntitle = "B"\nupdated = 2022-01-01\n+++\n')
            build_site(content, out)
            (content / "b.md").unlink()
            build_site(content, out)
            self.assertFalse((out / "posts" / "b").exists())

    def test_malformed_content_aborts_before_writing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            content = Path(td) / "content"
            out = Path(td) / "public"
            _write(content, "good.md", '+++\ntitle = "Good"\nupdated = 2022-01-01\n+++\n')
            _write(content, "bad.md", '+++\ntitle = "Bad"\nupdated = "yesterday"\n+++\n')
            _write(content, "worse.md", "no metadata\n")

            with self.assertRaises(ContentError) as ctx:
                build_site(content, out)
            self.assertEqual(len(ctx.exception.problems), 2)
            self.assertFalse(out.exists())

    def test_warnings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            content = Path(td) / "content"
            _write(content, "a.md", '+++\ntitle = "Same"\ndate = 2022-05-01\nupdated = 2022-01-01\n+++\n\nText\n')
            _write(content, "b.md", '+++\ntitle = "same"\nupdated = 2022-01-01\n+++\n')

            report = build_site(content, Path(td) / "public")
            joined = "\n".join(report.warnings)
            self.assertIn("a: updated 2022-01-01 is before date 2022-05-01", joined)
            self.assertIn("b: empty body", joined)
            self.assertIn("b: same title as a", joined)


if __name__ == "__main__":
    unittest.main()
