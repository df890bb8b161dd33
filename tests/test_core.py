import logging
from datetime import datetime, UTC

import pytest

from media_organizer.core import MediaOrganizerApp
from media_organizer.exceptions import GpsPolicyAbort, ProviderUnavailableError
from media_organizer.models import RunConfig

GPS = {"gps_latitude": "[52, 22, 1]"}


def files_under(root):
    return sorted(str(p.relative_to(root)) for p in root.rglob("*") if p.is_file())


@pytest.fixture
def library(photo_provider, make_file, tmp_path):
    """a.jpg with EXIF date + GPS, b.mov with nothing but its mtime."""
    src = tmp_path / "src"
    make_file(src / "a.jpg", content="photo")
    make_file(src / "clips" / "b.mov", content="movie", mtime=datetime(2020, 1, 1, 10, 0, 1, tzinfo=UTC))
    make_file(src / "notes.txt")
    photo_provider.by_name["a.jpg"] = {"date_time_original": "2020:01:01 10:00:00", **GPS}
    return src


def test_end_to_end(scanner, library, tmp_path):
    dest = tmp_path / "dest"
    dest.mkdir()

    summary = MediaOrganizerApp(RunConfig(), scanner).organize(library, dest)

    assert files_under(dest) == ["2020/2020-01-01 10-00-00.jpg", "2020/2020-01-01 10-00-01.mov"]
    assert (dest / "2020" / "2020-01-01 10-00-00.jpg").read_text() == "photo"
    assert summary.copied == 2


def test_second_run_adds_one_disambiguated_copy_per_file(scanner, library, tmp_path):
    dest = tmp_path / "dest"
    dest.mkdir()
    app = MediaOrganizerApp(RunConfig(), scanner)

    app.organize(library, dest)
    app.organize(library, dest)

    assert files_under(dest) == [
        "2020/2020-01-01 10-00-00 (1).jpg",
        "2020/2020-01-01 10-00-00.jpg",
        "2020/2020-01-01 10-00-01 (1).mov",
        "2020/2020-01-01 10-00-01.mov",
    ]


def test_same_second_captures_get_distinct_names(scanner, photo_provider, make_file, tmp_path):
    src = tmp_path / "src"
    for name in ("burst1.jpg", "burst2.jpg", "burst3.JPG"):
        make_file(src / name)
        photo_provider.by_name[name] = {"date_time_original": "2021:08:15 09:30:00", **GPS}
    dest = tmp_path / "dest"

    MediaOrganizerApp(RunConfig(), scanner).organize(src, dest)

    assert files_under(dest) == [
        "2021/2021-08-15 09-30-00 (1).jpg",
        "2021/2021-08-15 09-30-00 (2).jpg",
        "2021/2021-08-15 09-30-00.jpg",
    ]


def test_gps_enforced_aborts_before_any_write(scanner, photo_provider, library, make_file, tmp_path):
    make_file(library / "c.jpg")
    photo_provider.by_name["c.jpg"] = {"date_time_original": "2019:05:05 05:05:05"}
    dest = tmp_path / "dest"
    dest.mkdir()

    with pytest.raises(GpsPolicyAbort):
        MediaOrganizerApp(RunConfig(enforce_gps=True), scanner).organize(library, dest)

    assert list(dest.iterdir()) == []


def test_gps_accepted_copies_everything(scanner, photo_provider, library, make_file, tmp_path):
    make_file(library / "c.jpg")
    photo_provider.by_name["c.jpg"] = {"date_time_original": "2019:05:05 05:05:05"}
    dest = tmp_path / "dest"
    questions = []

    def confirm(question):
        questions.append(question)
        return True

    MediaOrganizerApp(RunConfig(enforce_gps=False), scanner, confirm).organize(library, dest)

    assert len(questions) == 1
    assert files_under(dest) == [
        "2019/2019-05-05 05-05-05.jpg",
        "2020/2020-01-01 10-00-00.jpg",
        "2020/2020-01-01 10-00-01.mov",
    ]


def test_unreadable_file_is_skipped(scanner, photo_provider, library, make_file, tmp_path, caplog):
    caplog.set_level(logging.WARNING)
    make_file(library / "corrupt.jpg")
    photo_provider.broken.add("corrupt.jpg")
    dest = tmp_path / "dest"

    MediaOrganizerApp(RunConfig(), scanner).organize(library, dest)

    assert files_under(dest) == ["2020/2020-01-01 10-00-00.jpg", "2020/2020-01-01 10-00-01.mov"]
    assert "corrupt.jpg" in caplog.text


def test_metadata_read_once_per_file(scanner, photo_provider, movie_provider, library, tmp_path):
    MediaOrganizerApp(RunConfig(), scanner).organize(library, tmp_path / "dest")

    assert [p.name for p in photo_provider.calls] == ["a.jpg"]
    assert [p.name for p in movie_provider.calls] == ["b.mov"]


def test_parallel_metadata_keeps_naming_order(scanner, photo_provider, make_file, tmp_path):
    src = tmp_path / "src"
    names = [f"img{i:02d}.jpg" for i in range(12)]
    for name in names:
        make_file(src / name, content=name)
        photo_provider.by_name[name] = {"date_time_original": "2022:02:02 02:02:02", **GPS}
    dest = tmp_path / "dest"

    MediaOrganizerApp(RunConfig(workers=4), scanner).organize(src, dest)

    folder = dest / "2022"
    assert (folder / "2022-02-02 02-02-02.jpg").read_text() == "img00.jpg"
    for i in range(1, 12):
        assert (folder / f"2022-02-02 02-02-02 ({i}).jpg").read_text() == names[i]


def test_missing_exiftool_is_fatal(scanner, movie_provider, library, tmp_path):
    def unavailable(path):
        raise ProviderUnavailableError("'exiftool' is not installed or not on PATH")

    movie_provider.extract = unavailable

    with pytest.raises(ProviderUnavailableError):
        MediaOrganizerApp(RunConfig(), scanner).organize(library, tmp_path / "dest")


def test_dry_run_matches_real_run_output(scanner, library, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    dest = tmp_path / "dest"
    dest.mkdir()

    MediaOrganizerApp(RunConfig(dry_run=True), scanner).organize(library, dest)
    dry_messages = list(caplog.messages)
    caplog.clear()

    assert list(dest.iterdir()) == []

    MediaOrganizerApp(RunConfig(verbose=True), scanner).organize(library, dest)

    assert caplog.messages == dry_messages
    assert files_under(dest) == ["2020/2020-01-01 10-00-00.jpg", "2020/2020-01-01 10-00-01.mov"]
