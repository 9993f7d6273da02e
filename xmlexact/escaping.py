"""Escape the reserved characters of XML in text and attribute content."""
import re

_ESCAPE_RE = re.compile(
    r"(&(?!(?:apos|quot|[gl]t|amp|#[0-9]+|#x[0-9a-fA-F]+);))"
    r"|(^<!\[CDATA\[.+?\]\]>)"
    r"|([<>'\"])",
    re.DOTALL,
)

_REPLACEMENTS = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&apos;",
    '"': "&quot;",
}


def escape(text: str) -> str:
    """
    Escape ``text`` for the use in XML text or in an attribute value.

    Entities which are already valid (``&amp;``, ``&lt;``, ``&gt;``, ``&apos;``,
    ``&quot;`` and character references) are left as they are, and so is a CDATA
    section which opens the text.

    >>> escape("%<>\\"'")
    '%&lt;&gt;&quot;&apos;'

    >>> escape("&gt;&lt;&amp;")
    '&gt;&lt;&amp;'

    >>> escape("<![CDATA['><]]>")
    "<![CDATA['><]]>"
    """
    return _ESCAPE_RE.sub(
        lambda mtch: (
            mtch.group(2)
            if mtch.group(2) is not None
            else _REPLACEMENTS[mtch.group(0)]
        ),
        text,
    )
