from app.validation import (
    InvalidFilename,
    InvalidPath,
    NoData,
    validate_data,
    validate_path,
)
import pytest


def test_valid_file_path_is_cleaned():
    vp = validate_path("/a/./b/../c.txt", ".txt")
    assert vp.path == "/a/c.txt"


@pytest.mark.parametrize("path", ["", "a/b.txt", "relative.txt", "/bad\x00.txt"])
def test_invalid_paths(path):
    with pytest.raises(InvalidPath):
        validate_path(path, ".txt")


@pytest.mark.parametrize("path", ["/a/b.md", "/a/.txt", "/a/b.txt/", "/"])
def test_invalid_filenames(path):
    with pytest.raises(InvalidFilename):
        validate_path(path, ".txt")


def test_directory_paths_skip_filename_check():
    assert validate_path("/some/dir/").path == "/some/dir"
    assert validate_path("/").path == "/"


def test_short_names_are_accepted():
    assert validate_path("/t.txt", ".txt").path == "/t.txt"


def test_validate_data():
    assert validate_data("x").data == "x"
    with pytest.raises(NoData):
        validate_data("")
    with pytest.raises(NoData):
        validate_data(None)
