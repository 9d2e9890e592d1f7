import re

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w-]+", re.ASCII)


def slugify(title: str) -> str:
    """Derive a URL slug from a post title.

    "An Analysis: Interstellar!" -> "an-analysis-interstellar"
    """
    slug = _WHITESPACE.sub("-", title.lower())
    return _NON_WORD.sub("", slug)
