"""Configuration constants and paths for blogsite."""

import os
from pathlib import Path

# Posts live under content/posts by default; override via BLOGSITE_CONTENT_DIR
CONTENT_DIR = Path(os.getenv("BLOGSITE_CONTENT_DIR", Path.cwd() / "content" / "posts"))

# Rendered pages
OUTPUT_DIR = Path(os.getenv("BLOGSITE_OUTPUT_DIR", Path.cwd() / "public"))

SITE_TITLE = os.getenv("BLOGSITE_TITLE", "notes on software")

# Prefix for absolute links; empty keeps every link relative
BASE_URL = os.getenv("BLOGSITE_BASE_URL", "").rstrip("/")

# Document files
DOCUMENT_SUFFIX = ".md"
SECTION_INDEX_NAME = "_index.md"

# Front-matter delimiters
TOML_DELIMITER = "+++"
YAML_DELIMITER = "---"

# Reading time estimate
WORDS_PER_MINUTE = 200

# Bumped when the rendered page layout changes
SCHEMA_VERSION = 1
