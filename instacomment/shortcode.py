import re

SHORTCODE_RE = re.compile(r"instagram\.com/(?:p|reel|tv)/([A-Za-z0-9_-]+)", re.IGNORECASE)


def extract_shortcode(link) -> str | None:
    """Return the post shortcode from an Instagram link, or None if it has none."""
    if not isinstance(link, str):
        return None
    match = SHORTCODE_RE.search(link)
    return match.group(1) if match else None


def build_post_url(shortcode: str, template: str = "https://www.instagram.com/p/{shortcode}/") -> str:
    return template.format(shortcode=shortcode)
