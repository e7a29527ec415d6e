# tests/test_secure_storage.py
import os
import platform
import stat

import pytest
from cryptography.fernet import Fernet

from utils.storage import KEY_FILE_NAME, SecureStorage


def test_round_trip_and_encrypted_on_disk(storage):
    storage.set_item("access_token", "secret-value")

    assert storage.get_item("access_token") == "secret-value"
    raw = (storage.directory / "access_token").read_bytes()
    assert b"secret-value" not in raw


def test_missing_item_reads_as_none(storage):
    assert storage.get_item("refresh_token") is None
    assert not storage.has_item("refresh_token")


def test_delete_item(storage):
    storage.set_item("refresh_token", "r")
    storage.delete_item("refresh_token")
    storage.delete_item("refresh_token")

    assert storage.get_item("refresh_token") is None


def test_value_written_with_another_key_reads_as_missing(tmp_path):
    directory = str(tmp_path / "creds")
    SecureStorage(directory=directory, key=Fernet.generate_key().decode()).set_item("access_token", "a")

    other = SecureStorage(directory=directory, key=Fernet.generate_key().decode())

    assert other.has_item("access_token")
    assert other.get_item("access_token") is None


def test_generated_key_is_reused(tmp_path):
    directory = str(tmp_path / "creds")
    SecureStorage(directory=directory, key="").set_item("access_token", "a")

    reopened = SecureStorage(directory=directory, key="")

    assert (reopened.directory / KEY_FILE_NAME).exists()
    assert reopened.get_item("access_token") == "a"


@pytest.mark.parametrize("name", ["", ".key", "../escape", "a/b"])
def test_rejects_unsafe_names(storage, name):
    with pytest.raises(ValueError):
        storage.set_item(name, "x")


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_files_are_private(storage):
    storage.set_item("access_token", "a")

    mode = stat.S_IMODE(os.stat(storage.directory / "access_token").st_mode)
    assert mode == 0o600
    assert stat.S_IMODE(os.stat(storage.directory).st_mode) == 0o700
