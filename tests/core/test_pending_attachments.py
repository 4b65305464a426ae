"""
Test suite for the pending-send attachment set.

Tests that preview handles are created for images only and are released
on every path a file leaves the set.

System role: Verification of preview resource lifecycle
"""

import pytest

from chatflow.core.attachments.pending import PendingAttachments, PreviewRegistry
from chatflow.core.attachments.validator import MAX_ATTACHMENT_BYTES, CandidateFile


@pytest.fixture
def registry() -> PreviewRegistry:
    return PreviewRegistry()


@pytest.fixture
def pending(registry) -> PendingAttachments:
    return PendingAttachments(previews=registry)


def image(name="img.png") -> CandidateFile:
    return CandidateFile(name=name, content_type="image/png", size=4, data=b"\x89PNG")


def text_file(name="notes.txt") -> CandidateFile:
    return CandidateFile(name=name, content_type="text/plain", size=5, data=b"hello")


class TestAdd:
    def test_images_get_previews_other_files_do_not(self, pending, registry):
        # Act
        rejections = pending.add([image(), text_file()])

        # Assert
        assert rejections == []
        assert len(pending) == 2
        assert pending.items[0].preview is not None
        assert pending.items[0].preview.url.startswith("blob:preview/")
        assert pending.items[1].preview is None
        assert registry.active_count == 1

    def test_rejected_files_are_returned_and_not_staged(self, pending, registry):
        too_big = CandidateFile(name="big.png", content_type="image/png",
                                size=MAX_ATTACHMENT_BYTES + 1)

        rejections = pending.add([too_big, image()])

        assert [r.file.name for r in rejections] == ["big.png"]
        assert pending.files == [image()]
        assert registry.active_count == 1

    def test_preview_resolves_to_file_bytes(self, pending, registry):
        pending.add([image()])

        assert registry.resolve(pending.items[0].preview) == b"\x89PNG"


class TestRelease:
    def test_remove_releases_that_preview(self, pending, registry):
        pending.add([image("a.png"), image("b.png")])

        removed = pending.remove(0)

        assert removed.name == "a.png"
        assert registry.active_count == 1
        assert [f.name for f in pending.files] == ["b.png"]

    def test_remove_out_of_range_raises(self, pending):
        with pytest.raises(IndexError):
            pending.remove(0)

    def test_clear_releases_all(self, pending, registry):
        pending.add([image("a.png"), image("b.png"), text_file()])

        pending.clear()

        assert len(pending) == 0
        assert registry.active_count == 0

    def test_take_returns_files_and_releases(self, pending, registry):
        pending.add([image(), text_file()])

        files = pending.take()

        assert [f.name for f in files] == ["img.png", "notes.txt"]
        assert len(pending) == 0
        assert registry.active_count == 0

    def test_release_is_idempotent(self, registry):
        handle = registry.create(image())

        registry.release(handle)
        registry.release(handle)

        assert registry.active_count == 0
        assert registry.resolve(handle) is None
