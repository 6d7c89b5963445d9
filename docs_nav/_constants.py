"""Common literal values used across docs_nav.

These constants keep the placeholder format, file suffixes, and sentinel slugs
centralized so the repository, resolver, renderer, and tests import the same
values without drifting.

Examples
--------
>>> from docs_nav import _constants
>>> _constants.NOT_FOUND_TEMPLATE.format(language="en", slug="bogus")
'# 404\\nNot found: en/bogus'
>>> _constants.INDEX_SLUG
'index'
"""

DOC_SUFFIX = ".md"
INDEX_SLUG = "index"
NOT_FOUND_TEMPLATE = "# 404\nNot found: {language}/{slug}"
DEFAULT_BASE_PATH = "docs"
DEFAULT_TOC_MAX_LEVEL = 3
