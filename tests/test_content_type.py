import pytest

from formmail.utils.content_type import detect_content_type


@pytest.mark.parametrize('body', [
    '<!DOCTYPE html>\n<html><body>Hi</body></html>',
    '<html>\n<p>Hi</p></html>',
    '  \n\t<p>Hi</p>',
    '<div class="x">Hi</div>',
    '<!-- comment -->\n<table></table>',
    b'<HTML>',
])
def test_html(body):
    assert detect_content_type(body) == 'text/html'


@pytest.mark.parametrize('body', [
    'Hi Ana,\n\nthanks for the message.',
    '',
    '<html',
    '<pre>not in the signature list</pre>',
    '<bold>no</bold>',
    'Text first <p>then a tag</p>',
])
def test_plain(body):
    assert detect_content_type(body) == 'text/plain'
