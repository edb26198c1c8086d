"""Pick an email content type by sniffing the rendered body."""

# Leading signatures of an HTML document, per the WHATWG MIME sniffing rules
HTML_SIGNATURES = (
    b'<!DOCTYPE HTML',
    b'<HTML',
    b'<HEAD',
    b'<SCRIPT',
    b'<IFRAME',
    b'<H1',
    b'<DIV',
    b'<FONT',
    b'<TABLE',
    b'<A',
    b'<STYLE',
    b'<TITLE',
    b'<B',
    b'<BODY',
    b'<BR',
    b'<P',
    b'<!--',
)

WHITESPACE = b'\t\n\x0c\r '

# Only the start of the body is inspected
SNIFF_LENGTH = 512


def detect_content_type(body):
    """Return ``text/html`` if ``body`` looks like HTML, ``text/plain`` otherwise."""
    if isinstance(body, str):
        body = body.encode('utf-8')
    data = body[:SNIFF_LENGTH].lstrip(WHITESPACE)

    for signature in HTML_SIGNATURES:
        if len(data) <= len(signature):
            continue
        if data[:len(signature)].upper() != signature:
            continue
        if data[len(signature):len(signature) + 1] in (b' ', b'>'):
            return 'text/html'
    return 'text/plain'
