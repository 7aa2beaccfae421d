from tr7rt.debugfs import (
    DebugFileSystem,
    LocalDebugFile,
    ReadWrite,
    debug_file_system,
)


def test_write_then_read_round_trip(tmp_path):
    path = tmp_path / "out.bin"
    payload = b"hello debug"
    writer = LocalDebugFile()
    assert writer.open(str(path), ReadWrite.WRITE)
    assert writer.write(payload) == len(payload)
    writer.close()

    reader = LocalDebugFile()
    assert reader.open(str(path), ReadWrite.READ)
    assert reader.size() == len(payload)
    assert reader.read(len(payload)) == payload
    assert reader.end_of_file()
    reader.close()


def test_partial_read_is_not_end_of_file(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"abcdef")
    with LocalDebugFile() as f:
        assert f.open(str(path), ReadWrite.READ)
        assert f.read(2) == b"ab"
        assert not f.end_of_file()


def test_open_missing_file_fails(tmp_path):
    f = LocalDebugFile()
    assert f.open(str(tmp_path / "missing"), ReadWrite.READ) is False
    assert f.is_open() is False
    assert f.read(4) == b""
    assert f.write(b"x") == 0


def test_close_clears_name(tmp_path):
    path = tmp_path / "name.bin"
    path.write_bytes(b"x")
    f = LocalDebugFile()
    assert f.open(str(path), ReadWrite.READ)
    assert f.file_name == str(path)
    f.close()
    assert f.file_name == ""
    assert f.is_open() is False


def test_exists(tmp_path):
    path = tmp_path / "present.bin"
    path.write_bytes(b"")
    f = LocalDebugFile()
    assert f.exists(str(path)) is True
    assert f.exists(str(tmp_path / "absent.bin")) is False


def test_write_mode_truncates_existing(tmp_path):
    path = tmp_path / "trunc.bin"
    path.write_bytes(b"old contents")
    with LocalDebugFile() as f:
        assert f.open(str(path), ReadWrite.WRITE)
        f.write(b"new")
        f.flush()
    assert path.read_bytes() == b"new"


def test_file_system_queries(tmp_path):
    path = tmp_path / "sized.bin"
    path.write_bytes(b"12345")
    fs = DebugFileSystem()
    assert fs.file_exists(str(path))
    assert fs.get_file_size(str(path)) == len(b"12345")
    assert fs.get_file_size(str(tmp_path / "nope")) == 0
    assert not fs.file_exists(str(tmp_path / "nope"))


def test_create_and_destroy_singleton():
    instance = DebugFileSystem.create()
    assert debug_file_system() is instance
    DebugFileSystem.destroy()
    assert debug_file_system() is None