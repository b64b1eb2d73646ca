"""Tests for the image resolver."""

from __future__ import annotations

from studiodocs.core.images import ImageSet, ResolvedImage

IMAGE_HOST = "https://img.test"


class TestImageResolver:
    def test_resolves_image_with_size(self, resolver):
        image = resolver.resolve(f"{IMAGE_HOST}/ok/a.png")
        assert image is not None
        assert (image.width, image.height) == (40, 20)
        assert image.content_type == "image/png"
        assert image.aspect_ratio == 2.0

    def test_failure_modes_yield_none(self, resolver):
        assert resolver.resolve(f"{IMAGE_HOST}/missing/a.png") is None
        assert resolver.resolve(f"{IMAGE_HOST}/broken/a.png") is None
        assert resolver.resolve(f"{IMAGE_HOST}/down/a.png") is None

    def test_non_http_reference_is_not_fetched(self, resolver, image_transport):
        assert resolver.resolve("file:///etc/passwd") is None
        assert resolver.resolve("") is None
        assert image_transport.requested == []

    def test_one_bad_image_does_not_affect_others(self, resolver):
        refs = [f"{IMAGE_HOST}/ok/1.png", f"{IMAGE_HOST}/missing/2.png",
                f"{IMAGE_HOST}/down/3.png", f"{IMAGE_HOST}/ok/4.png"]
        images = resolver.resolve_many(refs)
        assert images.resolved_count == 2
        assert images.get(refs[0]) is not None
        assert images.get(refs[3]) is not None
        assert set(images.failed) == {refs[1], refs[2]}

    def test_duplicates_fetched_once(self, resolver, image_transport):
        ref = f"{IMAGE_HOST}/ok/same.png"
        images = resolver.resolve_many([ref, ref, None, ref])
        assert images.resolved_count == 1
        assert image_transport.requested == ["/ok/same.png"]


class TestResolvedImage:
    def test_fit_keeps_aspect_ratio(self):
        image = ResolvedImage(url="x", data=b"", width=200, height=100)
        dx, dy, w, h = image.fit(4.0, 4.0)
        assert (w, h) == (4.0, 2.0)
        assert (dx, dy) == (0.0, 1.0)

    def test_stream_is_fresh(self, png_bytes):
        image = ResolvedImage(url="x", data=png_bytes, width=40, height=20)
        assert image.stream().read() == image.stream().read()

    def test_image_set_get_missing(self):
        assert ImageSet().get(None) is None
        assert ImageSet().get("https://nowhere") is None
