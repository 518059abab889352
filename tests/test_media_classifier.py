import pytest

from lightbrowser.utils.media_classifier import (
    ClassificationDecision,
    RequestClassifier,
    ResourceRequest,
    classify,
)

ALLOW = ClassificationDecision.ALLOW
BLOCK = ClassificationDecision.BLOCK

CHROME_DOCUMENT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
CHROME_IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "https://example.com/photo.png",
        "https://example.com/clip.MP4",
        "https://example.com/gallery/cat.jpeg?size=large",
    ],
)
def test_document_accept_is_always_allowed(url):
    assert classify(ResourceRequest(url=url, accept_header=CHROME_DOCUMENT_ACCEPT)) is ALLOW


def test_xhtml_accept_counts_as_document():
    request = ResourceRequest(url="https://example.com/a.png", accept_header="application/xhtml+xml")
    assert request.is_main_document_navigation
    assert classify(request) is ALLOW


@pytest.mark.parametrize("accept", [CHROME_IMAGE_ACCEPT, "image/png", "video/webm,video/*;q=0.9", "IMAGE/GIF"])
def test_image_and_video_accept_is_blocked(accept):
    assert classify(ResourceRequest(url="https://cdn.example.com/asset", accept_header=accept)) is BLOCK


def test_only_primary_media_range_is_considered():
    # image/* appears later in the list, but the request is primarily for JSON
    request = ResourceRequest(url="https://api.example.com/items", accept_header="application/json, image/*")
    assert classify(request) is ALLOW


@pytest.mark.parametrize("accept", [None, "", "*/*"])
def test_extension_fallback_without_usable_accept(accept):
    assert classify(ResourceRequest(url="https://example.com/a.png", accept_header=accept)) is BLOCK
    assert classify(ResourceRequest(url="https://example.com/index.html", accept_header=accept)) is ALLOW
    assert classify(ResourceRequest(url="https://example.com/api/data", accept_header=accept)) is ALLOW


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/a.JPG",
        "https://example.com/b.jpeg",
        "https://example.com/c.gif",
        "https://example.com/d.webp",
        "https://example.com/e.svg",
        "https://example.com/f.webm",
        "https://example.com/g.ogg",
        "https://example.com/h.png?v=3",
        "https://example.com/i.mp4#t=10",
    ],
)
def test_media_extensions_match_the_path(url):
    assert classify(ResourceRequest(url=url)) is BLOCK


def test_extension_in_query_does_not_count():
    assert classify(ResourceRequest(url="https://example.com/render?file=a.png")) is ALLOW


def test_classification_is_referentially_transparent():
    requests = [
        ResourceRequest(url="https://example.com/a.png"),
        ResourceRequest(url="https://example.com/", accept_header=CHROME_DOCUMENT_ACCEPT),
        ResourceRequest(url="https://example.com/app.js", accept_header="*/*"),
    ]
    first = [classify(r) for r in requests]
    second = [classify(r) for r in reversed(requests)]
    assert first == list(reversed(second))
    assert first == [BLOCK, ALLOW, ALLOW]


def test_fallback_is_tunable():
    strict = RequestClassifier(fallback=BLOCK)
    assert strict.classify(ResourceRequest(url="https://example.com/stream")) is BLOCK
    # Documents stay allowed under the strict fallback.
    assert strict.classify(ResourceRequest(url="https://example.com/", accept_header="text/html")) is ALLOW


def test_custom_extension_set():
    classifier = RequestClassifier(extensions=[".AVIF"])
    assert classifier.classify(ResourceRequest(url="https://example.com/x.avif")) is BLOCK
    assert classifier.classify(ResourceRequest(url="https://example.com/x.png")) is ALLOW


class _PlaywrightRequest:
    def __init__(self, url, headers):
        self.url = url
        self.headers = headers


def test_from_playwright_reads_lowercase_accept():
    request = ResourceRequest.from_playwright(
        _PlaywrightRequest("https://example.com/", {"accept": "text/html"})
    )
    assert request.accept_header == "text/html"
    assert request.is_main_document_navigation


def test_from_playwright_without_accept():
    request = ResourceRequest.from_playwright(_PlaywrightRequest("https://example.com/x.gif", {}))
    assert request.accept_header is None
    assert classify(request) is BLOCK
