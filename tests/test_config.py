import pytest

from lspbridge.config import ClientConfig, make_unique_root


def test_single_file_mode_writes_starter_file(tmp_path):
    root = tmp_path / "workspace"
    result = make_unique_root(False, root)
    assert result == str(root)
    assert (root / "main.py").read_text(encoding="utf-8") == "def main():\n\tprint('Hello world')"


def test_workspace_mode_creates_empty_directory(tmp_path):
    root = tmp_path / "ws"
    result = make_unique_root(True, root)
    assert result == str(root)
    assert root.is_dir()
    assert list(root.iterdir()) == []


def test_nested_directories_are_created(tmp_path):
    root = tmp_path / "a" / "b" / "c"
    make_unique_root(True, root)
    assert root.is_dir()


def test_existing_directory_is_reused_and_starter_rewritten(tmp_path):
    root = tmp_path / "workspace"
    make_unique_root(False, root)
    (root / "main.py").write_text("changed", encoding="utf-8")
    (root / "other.py").write_text("kept", encoding="utf-8")
    make_unique_root(False, root)
    assert (root / "main.py").read_text(encoding="utf-8") == "def main():\n\tprint('Hello world')"
    assert (root / "other.py").read_text(encoding="utf-8") == "kept"


def test_root_that_is_a_file_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(OSError):
        make_unique_root(True, blocker)


def test_client_config_is_frozen_and_defaults_to_single_file():
    config = ClientConfig(language="python", root="/tmp/root")
    assert config.workspace_mode is False
    with pytest.raises(AttributeError):
        config.language = "go"