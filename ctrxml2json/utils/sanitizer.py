"""Text clean-up applied to trial XML before parsing.

Register exports contain line breaks, control characters and unescaped
quotes and ampersands that make them ill-formed. The steps below repair
them in a fixed order; each step relies on the ones before it.
"""
import re

from ctrxml2json.models.schemas import AmpersandPolicy

# Characters allowed in XML 1.0 character data
ILLEGAL_XML_CHARS = re.compile("[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd]+")
MULTIPLE_SPACES = re.compile(' +')
# An ampersand that does not already start an entity or character reference
BARE_AMPERSAND = re.compile(r'&(?!(?:[A-Za-z_][\w.-]*|#[0-9]+|#x[0-9A-Fa-f]+);)')

LINE_CHARACTERS = str.maketrans('', '', '\n\r\t')
TRIM_CHARACTERS = ' \t\n\r\0\x0b'


def _trim(text: str) -> str:
    return text.strip(TRIM_CHARACTERS)


def sanitize_text(text: str, ampersand_policy: AmpersandPolicy = AmpersandPolicy.LEGACY) -> str:
    """Normalise raw file contents into parseable XML text.

    Args:
        text: Decoded file contents
        ampersand_policy: LEGACY escapes every '&' (so existing entities are
            escaped twice); PRESERVE_ENTITIES only escapes bare ones

    Returns:
        str: The cleaned text; never raises for bad markup
    """
    text = text.translate(LINE_CHARACTERS)
    text = ILLEGAL_XML_CHARS.sub(' ', text)
    text = MULTIPLE_SPACES.sub(' ', text)
    text = _trim(text)

    text = text.replace("'", " &apos;")

    text = _trim(text)
    if AmpersandPolicy(ampersand_policy) is AmpersandPolicy.PRESERVE_ENTITIES:
        text = BARE_AMPERSAND.sub(' &amp;', text)
    else:
        text = text.replace('&', ' &amp;')

    # single quotes only
    text = _trim(text)
    return text.replace('"', "'")
