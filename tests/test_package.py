"""Tests for container and package descriptor resolution."""

import io
import zipfile

import pytest

from chapter_extractor.errors import ContainerError
from chapter_extractor.package import open_package, read_entry, resolve_package
from conftest import EpubBuilder, paragraphs


def _zip(files: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


class TestResolvePackage:
    """Tests for resolve_package."""

    def test_manifest_and_reading_order(self, epub_builder: EpubBuilder) -> None:
        """Test that the descriptor lists manifest items in spine order."""
        epub_builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))
        epub_builder.add_chapter("c2", "ch2.xhtml", paragraphs("two"))
        epub_builder.add_nav([("One", "ch1.xhtml")])

        with open_package(epub_builder.build()) as archive:
            descriptor = resolve_package(archive)

        assert descriptor.descriptor_path == "OEBPS/content.opf"
        assert descriptor.base_dir == "OEBPS"
        assert descriptor.manifest["c1"] == "ch1.xhtml"
        assert descriptor.reading_order == ["c1", "c2"]
        assert descriptor.nav_href == "nav.xhtml"
        assert descriptor.reading_paths() == ["OEBPS/ch1.xhtml", "OEBPS/ch2.xhtml"]

    def test_descriptor_at_root(self) -> None:
        """Test a package whose descriptor sits at the archive root."""
        builder = EpubBuilder(opf_dir="")
        builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))

        with open_package(builder.build()) as archive:
            descriptor = resolve_package(archive)

        assert descriptor.base_dir == ""
        assert descriptor.reading_paths() == ["ch1.xhtml"]

    def test_navigation_named_items_left_out_of_reading_order(self, epub_builder: EpubBuilder) -> None:
        """Test that spine items named like navigation documents are skipped."""
        epub_builder.add_chapter("toc", "toc.xhtml", paragraphs("contents"))
        epub_builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))

        with open_package(epub_builder.build()) as archive:
            descriptor = resolve_package(archive)

        assert descriptor.reading_order == ["c1"]

    def test_ncx_from_spine_attribute(self, epub_builder: EpubBuilder) -> None:
        epub_builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))
        epub_builder.add_ncx([("One", "ch1.xhtml")])

        with open_package(epub_builder.build()) as archive:
            descriptor = resolve_package(archive)

        assert descriptor.ncx_href == "toc.ncx"
        assert descriptor.nav_href is None

    def test_non_html_spine_items_are_not_read(self, epub_builder: EpubBuilder) -> None:
        epub_builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))
        epub_builder.add("img", "cover.png", b"\x89PNG", media_type="image/png")

        with open_package(epub_builder.build()) as archive:
            descriptor = resolve_package(archive)

        assert descriptor.reading_paths() == ["OEBPS/ch1.xhtml"]


class TestContainerErrors:
    """Tests for fatal container problems."""

    def test_not_a_zip(self) -> None:
        with pytest.raises(ContainerError):
            with open_package(b"definitely not a zip"):
                pass

    def test_missing_container(self, epub_builder: EpubBuilder) -> None:
        epub_builder.add_chapter("c1", "ch1.xhtml", paragraphs("one"))
        epub_builder.container = False

        with open_package(epub_builder.build()) as archive:
            with pytest.raises(ContainerError, match="container.xml"):
                resolve_package(archive)

    def test_missing_descriptor(self) -> None:
        data = _zip(
            {
                "META-INF/container.xml": (
                    '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
                    '<rootfiles><rootfile full-path="OEBPS/missing.opf"/></rootfiles></container>'
                )
            }
        )
        with open_package(data) as archive:
            with pytest.raises(ContainerError) as exc_info:
                resolve_package(archive)
        assert exc_info.value.code == "container_error"

    def test_malformed_descriptor(self) -> None:
        data = _zip(
            {
                "META-INF/container.xml": (
                    '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
                    '<rootfiles><rootfile full-path="content.opf"/></rootfiles></container>'
                ),
                "content.opf": "<package><manifest>",
            }
        )
        with open_package(data) as archive:
            with pytest.raises(ContainerError, match="content.opf"):
                resolve_package(archive)

    def test_no_rootfile(self) -> None:
        data = _zip({"META-INF/container.xml": "<container><rootfiles/></container>"})
        with open_package(data) as archive:
            with pytest.raises(ContainerError):
                resolve_package(archive)


def test_read_entry_case_insensitive() -> None:
    data = _zip({"OEBPS/Chapter1.XHTML": "x"})
    with open_package(data) as archive:
        assert read_entry(archive, "oebps/chapter1.xhtml") == b"x"
        assert read_entry(archive, "missing.xhtml") is None
