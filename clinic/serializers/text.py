import html

import bleach


def clean_text(v):
    """Plain text: every tag dropped, entities stored as the characters they name.

    Decoding can expose markup that was sent escaped (``&lt;b&gt;``), so
    the value is cleaned again until it no longer changes.
    """
    text = (v or '').strip()
    for _ in range(5):
        cleaned = html.unescape(bleach.clean(text, tags=set(), strip=True)).strip()
        if cleaned == text:
            break
        text = cleaned
    return text
