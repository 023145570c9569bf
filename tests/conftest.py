"""
Shared fixtures for the markup engine tests.
"""

import logging

import pytest

from markup_engine.documents import HTMLDocument
from markup_engine.parser.html_parser import configure_parser


BLOG_MARKUP = """<html><head><title>Blog</title></head><body>
<div id="main" class="content wide">
<article class="post featured" data-id="1"><h2>First</h2><p class="lead">Hello <b>world</b></p></article>
<article class="post" data-id="2"><h2>Second</h2><p>Bye</p><a href="/x" rel="next">more</a></article>
</div>
<div class="sidebar"><p>Side</p></div>
</body></html>"""


@pytest.fixture(autouse=True)
def default_parser():
    """Every test starts with the non-strict shared parser."""
    configure_parser(strict=False)
    yield
    configure_parser(strict=False)


@pytest.fixture(autouse=True)
def clean_engine_logger():
    yield
    logger = logging.getLogger("markup_engine")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def blog():
    return HTMLDocument(BLOG_MARKUP)


@pytest.fixture
def html():
    """Factory for HTML documents."""
    def make(markup, options=None):
        return HTMLDocument(markup, options)
    return make
