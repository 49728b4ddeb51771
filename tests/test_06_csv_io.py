"""Test CSV export and import of matrices."""
import logging
import pytest
import rlematrix as rm
from rlematrix import RleMatrix
from rlematrix.exceptions import CsvIOError


def test_write_format(a23, tmp_path):
    path = tmp_path / "a.csv"
    a23.write(path)
    assert (path.read_text() == "1,2,3\n4,5,6\n")


def test_write_read_back(banded, tmp_path):
    path = tmp_path / "banded.csv"
    banded.write(path)
    assert (RleMatrix.read(path) == banded)
    assert (RleMatrix.read(str(path)).csize() == banded.csize())


def test_write_keeps_big_integers(tmp_path):
    path = tmp_path / "big.csv"
    RleMatrix.from_rows([[2**70, -1]]).write(path)
    assert (path.read_text() == "1180591620717411303424,-1\n")


def test_io_is_logged(a23, tmp_path, caplog):
    path = tmp_path / "a.csv"
    with caplog.at_level(logging.INFO, logger='rlematrix'):
        a23.write(path)
        RleMatrix.read(path)
    assert ("written to" in caplog.text)
    assert ("read from" in caplog.text)


def test_disable_logger(a23, tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger='rlematrix'):
        with rm.DisableLogger():
            a23.write(tmp_path / "a.csv")
    assert (caplog.text == "")


def test_io_errors(a23, tmp_path):
    with pytest.raises(CsvIOError):
        RleMatrix.read(tmp_path / "missing.csv")
    with pytest.raises(OSError):
        a23.write(tmp_path / "no_such_dir" / "a.csv")
    bad = tmp_path / "bad.csv"
    bad.write_text("1,x\n")
    with pytest.raises(CsvIOError):
        RleMatrix.read(bad)


def test_big_integers_read_back(tmp_path):
    path = tmp_path / "big.csv"
    big = RleMatrix.from_rows([[2**70, -1], [0, -2**65]])
    big.write(path)
    back = RleMatrix.read(path)
    assert (back == big)
    assert (back[0, 0] == 2**70)
