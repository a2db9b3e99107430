"""Tests for archive dispatch, extraction and release installation."""

import os
import shutil
import zipfile

import py7zr
import pytest

from archive import ArchiveFormat, UnknownArchive, archive_path, install_release_files, new_archive, sanitize_name
from archive.sevenz import SevenZArchive
from archive.ziparchive import ZipArchive
from common.errors import ArchiveError, MissingAsset, NilManifest, UnknownArchiveFormat
from manifest import Manifest, ReleaseAsset, ReleaseFile, Repo


def make_zip(path, members):
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return str(path)


def make_7z(tmp_path, members):
    staging = tmp_path / "staging"
    archive = tmp_path / "mod.7z"
    with py7zr.SevenZipFile(archive, "w") as z:
        for name, data in members.items():
            src = staging / name
            src.parent.mkdir(parents=True, exist_ok=True)
            src.write_bytes(data)
            z.write(src, arcname=name)
    return str(archive)


class TestDispatch:
    """Test archive type detection by extension."""

    @pytest.mark.parametrize("name,cls", [
        ("mod.zip", ZipArchive),
        ("MOD.ZIP", ZipArchive),
        ("mod.7z", SevenZArchive),
        ("mod.rar", UnknownArchive),
        ("mod", UnknownArchive),
    ])
    def test_new_archive(self, name, cls):
        """Test the archive class follows the file extension."""
        assert type(new_archive(name)) is cls

    def test_unknown_format_raises(self, tmp_path):
        """Test unpacking an unknown format fails instead of silently succeeding."""
        archive = new_archive(str(tmp_path / "mod.tar.gz"))

        assert archive.format is ArchiveFormat.UNKNOWN
        with pytest.raises(UnknownArchiveFormat):
            archive.unpack(str(tmp_path / "out"))

    def test_unknown_format_is_archive_error(self):
        """Test UnknownArchiveFormat can be handled as any archive failure."""
        assert issubclass(UnknownArchiveFormat, ArchiveError)


class TestZipArchive:
    """Test zip extraction."""

    def test_extracts_everything(self, tmp_path):
        """Test every file lands under the destination."""
        path = make_zip(tmp_path / "mod.zip", {"a.txt": "A", "data/b.txt": "B"})
        out = tmp_path / "out"

        written = new_archive(path).unpack(str(out))

        assert written == 2
        assert (out / "a.txt").read_text() == "A"
        assert (out / "data" / "b.txt").read_text() == "B"

    def test_strips_source_prefix(self, tmp_path):
        """Test only members under the source folder are extracted, without the prefix."""
        path = make_zip(tmp_path / "mod.zip", {
            "README.md": "readme",
            "Mod/": "",
            "Mod/plugin.dll": "bin",
            "Mod/assets/tex.dds": "tex",
            "Modding/other.txt": "no",
        })
        out = tmp_path / "out"

        written = new_archive(path).unpack(str(out), "Mod")

        assert written == 2
        assert (out / "plugin.dll").read_text() == "bin"
        assert (out / "assets" / "tex.dds").read_text() == "tex"
        assert not (out / "README.md").exists()
        assert not (out / "other.txt").exists()

    def test_rejects_path_traversal(self, tmp_path):
        """Test a member escaping the destination aborts extraction."""
        path = make_zip(tmp_path / "evil.zip", {"../escape.txt": "x"})

        with pytest.raises(ArchiveError):
            new_archive(path).unpack(str(tmp_path / "out"))
        assert not (tmp_path / "escape.txt").exists()

    def test_corrupt_zip(self, tmp_path):
        """Test a damaged file raises ArchiveError."""
        path = tmp_path / "broken.zip"
        path.write_bytes(b"not a zip")

        with pytest.raises(ArchiveError):
            new_archive(str(path)).unpack(str(tmp_path / "out"))


class TestSevenZArchive:
    """Test 7z extraction."""

    def test_extracts_with_prefix(self, tmp_path):
        """Test 7z members are extracted with the source prefix stripped."""
        path = make_7z(tmp_path, {"Mod/plugin.dll": b"bin", "Mod/cfg/mod.ini": b"ini", "extra.txt": b"x"})
        out = tmp_path / "out"

        written = new_archive(path).unpack(str(out), "Mod/")

        assert written == 2
        assert (out / "plugin.dll").read_bytes() == b"bin"
        assert (out / "cfg" / "mod.ini").read_bytes() == b"ini"
        assert not (out / "extra.txt").exists()

    def test_corrupt_7z(self, tmp_path):
        """Test a damaged 7z file raises ArchiveError."""
        path = tmp_path / "broken.7z"
        path.write_bytes(b"not a 7z archive at all")

        with pytest.raises(ArchiveError):
            new_archive(str(path)).unpack(str(tmp_path / "out"))


class TestArchivePath:
    """Test download naming."""

    def test_sanitize_name(self):
        """Test spaces and separators are replaced."""
        assert sanitize_name("Better Maps/v1\\x") == "Better-Maps-v1-x"

    def test_archive_path(self, tmp_path):
        """Test the download path combines time, name and URL basename."""
        path = archive_path("core v1", str(tmp_path), "https://dl.example.test/v1/core.zip", now=1700000000)

        assert path == os.path.join(str(tmp_path), "1700000000-core-v1-core.zip")


class FakeDownloader:
    """Client stand-in that copies prepared archives instead of downloading."""

    def __init__(self, sources):
        self.sources = sources
        self.downloads = []

    def download_asset(self, asset, path, progress=None, repo=None):
        shutil.copyfile(self.sources[asset.download_url], path)
        size = os.path.getsize(path)
        if progress is not None:
            progress(size, size)
        self.downloads.append((asset.name, repo))
        return size


class TestInstallReleaseFiles:
    """Test installing a manifest's release files into a game folder."""

    def test_installs_into_destination(self, tmp_path):
        """Test each file is downloaded and unpacked under its destination."""
        src = make_zip(tmp_path / "src.zip", {"Core/core.dll": "dll"})
        url = "https://dl.example.test/v1.0.0/core.zip"
        release_file = ReleaseFile("core.zip", source="Core", destination="Mods/Core")
        release_file.asset = ReleaseAsset("core.zip", url, 10)
        manifest = Manifest(name="core", repo=Repo("x/core"), version="v1.0.0", files=[release_file])
        client = FakeDownloader({url: src})
        progress = []

        archives = install_release_files(
            manifest, client, str(tmp_path / "dl"), str(tmp_path / "game"),
            progress=lambda done, total: progress.append((done, total)),
        )

        assert len(archives) == 1
        assert archives[0].endswith("core.zip")
        assert (tmp_path / "game" / "Mods" / "Core" / "core.dll").read_text() == "dll"
        assert client.downloads == [("core.zip", "x/core")]
        assert progress

    def test_nil_manifest(self, tmp_path):
        """Test a missing manifest raises NilManifest."""
        with pytest.raises(NilManifest):
            install_release_files(None, FakeDownloader({}), str(tmp_path), str(tmp_path))

    def test_missing_asset(self, tmp_path):
        """Test a release file without an asset raises MissingAsset."""
        manifest = Manifest(repo=Repo("x/core"), version="v1.0.0", files=[ReleaseFile("core.zip")])

        with pytest.raises(MissingAsset) as excinfo:
            install_release_files(manifest, FakeDownloader({}), str(tmp_path / "dl"), str(tmp_path / "game"))

        assert excinfo.value.file_name == "core.zip"
