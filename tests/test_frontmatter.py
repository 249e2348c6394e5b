"""Tests for front-matter parsing and serialization."""

from __future__ import annotations

import unittest
from datetime import date

from blogsite.content.frontmatter import (
    FrontMatter,
    FrontMatterError,
    parse_front_matter,
    render_document_text,
    serialize_front_matter,
    split_front_matter,
)


class TestSplitFrontMatter(unittest.TestCase):
    def test_toml_block(self) -> None:
        fmt, raw, body = split_front_matter('+++\ntitle = "A"\n+++\n\nBody\n')
        self.assertEqual(fmt, "toml")
        self.assertEqual(raw, 'title = "A"')
        self.assertEqual(body, "Body\n")

    def test_yaml_block_with_crlf_and_bom(self) -> None:
        fmt, raw, body = split_front_matter("\ufeff---\r\ntitle: A\r\n---\r\nBody")
        self.assertEqual(fmt, "yaml")
        self.assertEqual(raw, "title: A")
        self.assertEqual(body, "Body")

    def test_missing_block(self) -> None:
        with self.assertRaises(FrontMatterError):
            split_front_matter("# Just markdown\n")

    def test_unterminated_block(self) -> None:
        with self.assertRaises(FrontMatterError) as ctx:
            split_front_matter('+++\ntitle = "A"\n', path="post.md")
        self.assertIn("post.md", str(ctx.exception))
        self.assertIn("unterminated", str(ctx.exception))


class TestParseFrontMatter(unittest.TestCase):
    def test_toml_native_dates(self) -> None:
        text = (
            "+++\n"
            'title = "Use .join()/.get() Judiciously in Java Async Chains"\n'
            "date = 2022-03-01\n"
            "updated = 2022-03-07\n"
            "[taxonomies]\n"
            'tags = ["java"]\n'
            "+++\n"
            "Body"
        )
        meta, body = parse_front_matter(text)
        self.assertEqual(meta.title, "Use .join()/.get() Judiciously in Java Async Chains")
        self.assertEqual(meta.updated, date(2022, 3, 7))
        self.assertEqual(meta.published, date(2022, 3, 1))
        self.assertEqual(meta.tags, ("java",))
        self.assertEqual(body, "Body")

    def test_yaml_string_and_datetime_dates(self) -> None:
        meta, _ = parse_front_matter("---\ntitle: T\nupdated: '2022-03-07'\n---\n")
        self.assertEqual(meta.updated, date(2022, 3, 7))

        meta, _ = parse_front_matter("---\ntitle: T\nupdated: 2022-03-07 10:30:00\n---\n")
        self.assertEqual(meta.updated, date(2022, 3, 7))

    def test_updated_falls_back_to_date(self) -> None:
        meta, _ = parse_front_matter('+++\ntitle = "T"\ndate = 2021-01-02\n+++\n')
        self.assertEqual(meta.updated, date(2021, 1, 2))

    def test_missing_title(self) -> None:
        with self.assertRaises(FrontMatterError) as ctx:
            parse_front_matter("+++\nupdated = 2022-03-07\n+++\n")
        self.assertIn("title", str(ctx.exception))

    def test_blank_title(self) -> None:
        with self.assertRaises(FrontMatterError):
            parse_front_matter('+++\ntitle = "   "\nupdated = 2022-03-07\n+++\n')

    def test_missing_updated(self) -> None:
        with self.assertRaises(FrontMatterError) as ctx:
            parse_front_matter('+++\ntitle = "T"\n+++\n')
        self.assertIn("updated", str(ctx.exception))

    def test_invalid_date(self) -> None:
        with self.assertRaises(FrontMatterError):
            parse_front_matter('+++\ntitle = "T"\nupdated = "March 7th"\n+++\n')

    def test_invalid_toml(self) -> None:
        with self.assertRaises(FrontMatterError):
            parse_front_matter("+++\ntitle = \n+++\n")

    def test_yaml_must_be_mapping(self) -> None:
        with self.assertRaises(FrontMatterError):
            parse_front_matter("---\n- a\n- b\n---\n")

    def test_unknown_keys_kept_as_extra(self) -> None:
        text = '+++\ntitle = "T"\nupdated = 2022-03-07\nweight = 3\n[extra]\nmath = true\n+++\n'
        meta, _ = parse_front_matter(text)
        self.assertEqual(meta.extra, {"weight": 3, "math": True})

    def test_empty_body_is_valid(self) -> None:
        meta, body = parse_front_matter('+++\ntitle = "T"\nupdated = 2022-03-07\n+++\n')
        self.assertEqual(meta.title, "T")
        self.assertEqual(body, "")


class TestSerializeFrontMatter(unittest.TestCase):
    def _meta(self, **kwargs) -> FrontMatter:
        data = {"title": "Use .join()/.get() Judiciously in Java Async Chains", "updated": date(2022, 3, 7)}
        data.update(kwargs)
        return FrontMatter(**data)

    def test_toml_round_trip(self) -> None:
        meta = self._meta(published=date(2022, 3, 1), tags=("java", "async"), extra={"weight": 2})
        parsed, body = parse_front_matter(serialize_front_matter(meta, "toml"))
        self.assertEqual(parsed.title, meta.title)
        self.assertEqual(parsed.updated, meta.updated)
        self.assertEqual(parsed, meta)
        self.assertEqual(body, "")

    def test_yaml_round_trip(self) -> None:
        meta = self._meta(title='Colons: "quotes" and \\ backslashes', draft=True)
        parsed, _ = parse_front_matter(serialize_front_matter(meta, "yaml"))
        self.assertEqual(parsed.title, meta.title)
        self.assertEqual(parsed.updated, meta.updated)
        self.assertTrue(parsed.draft)

    def test_toml_escapes_awkward_titles(self) -> None:
        for title in ['He said "hi"', "back\\slash", "tab\there", "naïve café ✓"]:
            with self.subTest(title=title):
                meta = self._meta(title=title)
                parsed, _ = parse_front_matter(serialize_front_matter(meta))
                self.assertEqual(parsed.title, title)

    def test_block_ends_with_newline(self) -> None:
        text = serialize_front_matter(self._meta())
        self.assertTrue(text.startswith("+++\n"))
        self.assertTrue(text.endswith("+++\n"))

    def test_toml_leaves_out_null_values(self) -> None:
        meta = self._meta(extra={"cover": None, "weight": 2, "links": [None, "a"]})
        text = serialize_front_matter(meta)
        self.assertNotIn("cover", text)
        parsed, _ = parse_front_matter(text)
        self.assertEqual(parsed.extra, {"weight": 2, "links": ["a"]})

    def test_unknown_format(self) -> None:
        with self.assertRaises(FrontMatterError):
            serialize_front_matter(self._meta(), "json")

    def test_document_text_round_trip(self) -> None:
        meta = self._meta()
        text = render_document_text(meta, "## Heading\n\nBody text.")
        parsed, body = parse_front_matter(text)
        self.assertEqual(parsed, meta)
        self.assertEqual(body, "## Heading\n\nBody text.\n")


if __name__ == "__main__":
    unittest.main()
