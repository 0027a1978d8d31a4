import pytest

from scribehub.errors import ValidationError


@pytest.mark.parametrize("file_name", ["../victim.txt", "../uploads/../victim.txt", "a/b.mp3", "", "."])
def test_path_for_refuses_names_outside_uploads(file_handler, file_name):
    with pytest.raises(ValidationError):
        file_handler.path_for(file_name)


def test_path_for_inside_uploads(file_handler):
    assert file_handler.path_for("t_SCRB_a.mp3") == file_handler.upload_dir / "t_SCRB_a.mp3"


@pytest.mark.anyio
async def test_delete_and_rename_stay_inside_uploads(file_handler):
    victim = file_handler.upload_dir.parent / "victim.txt"
    victim.write_bytes(b"keep me")
    file_handler.path_for("t_SCRB_a.mp3").write_bytes(b"audio")

    assert await file_handler.delete_file("../victim.txt") is False
    with pytest.raises(ValidationError):
        file_handler.rename_file("t_SCRB_a.mp3", "../moved.mp3")

    assert victim.read_bytes() == b"keep me"
    assert file_handler.path_for("t_SCRB_a.mp3").exists()
    assert not (file_handler.upload_dir.parent / "moved.mp3").exists()
