import re
from datetime import datetime

from domains.file_routing.collisions import CollisionResolver

FIXED = datetime(2024, 1, 15, 15, 30, 45)


def fixed_clock():
    return FIXED


def test_free_destination_is_returned_unchanged(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock)
    candidate = tmp_path / "report.pdf"

    assert resolver.resolve(candidate) == candidate
    assert resolver.resolve(candidate) == candidate


def test_existing_destination_gets_timestamp_before_extension(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock)
    candidate = tmp_path / "report.pdf"
    candidate.write_text("existing")

    resolved = resolver.resolve(candidate)

    assert resolved == tmp_path / "report-20240115-153045.pdf"
    assert resolved != candidate
    assert not resolved.exists()


def test_timestamp_pattern_with_real_clock(tmp_path):
    candidate = tmp_path / "data.zip"
    candidate.write_bytes(b"PK")

    resolved = CollisionResolver().resolve(candidate)

    assert resolved.parent == tmp_path
    assert re.fullmatch(r"data-\d{8}-\d{6}\.zip", resolved.name)


def test_original_extension_case_is_kept(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock)
    candidate = tmp_path / "Report.PDF"
    candidate.write_text("existing")

    assert resolver.resolve(candidate).name == "Report-20240115-153045.PDF"


def test_only_last_suffix_is_split(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock)
    candidate = tmp_path / "backup.tar.gz"
    candidate.write_text("existing")

    assert resolver.resolve(candidate).name == "backup.tar-20240115-153045.gz"


def test_custom_timestamp_format(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock, timestamp_format="%Y%m%d")
    candidate = tmp_path / "notes.txt"
    candidate.write_text("existing")

    assert resolver.resolve(candidate).name == "notes-20240115.txt"


def test_existing_directory_counts_as_collision(tmp_path):
    resolver = CollisionResolver(clock=fixed_clock)
    candidate = tmp_path / "album.zip"
    candidate.mkdir()

    assert resolver.resolve(candidate).name == "album-20240115-153045.zip"
