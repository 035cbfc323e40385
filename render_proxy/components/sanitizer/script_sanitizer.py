"""
Removes <script> elements from serialized HTML.

Only script elements are removed. Inline event-handler attributes and
`javascript:` URIs are left in place; callers that embed the output must not
assume it is free of every script execution vector.
"""
import re

# <script ...> through the nearest </script>, bodies may contain '<'.
SCRIPT_ELEMENT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
# An opening tag with no closing tag swallows the rest of the document.
UNTERMINATED_SCRIPT_RE = re.compile(r"<script\b.*\Z", re.IGNORECASE | re.DOTALL)
# Look-alike tags such as <scripts> are kept as text.
SCRIPT_PREFIX_RE = re.compile(r"<(?=script)", re.IGNORECASE)


def strip_script_tags(html: str) -> str:
    """Single pass removal of complete script elements."""
    return SCRIPT_ELEMENT_RE.sub("", html)


def sanitize(html: str) -> str:
    """
    Returns `html` with every script element removed.

    Removal is repeated until nothing changes, since cutting one element out
    can join the surrounding text into a new `<script` opening. The result
    contains no `<script` substring in any letter case and is stable:
    `sanitize(sanitize(x)) == sanitize(x)`.

    Args:
        html (str): Serialized document. None is treated as empty.

    Returns:
        str: The document without script elements.
    """
    if not html:
        return ""
    previous = None
    result = html
    while result != previous:
        previous = result
        result = strip_script_tags(result)
    result = UNTERMINATED_SCRIPT_RE.sub("", result)
    return SCRIPT_PREFIX_RE.sub("&lt;", result)
