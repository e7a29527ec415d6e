import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from settings import CREDENTIALS_DIR, CREDENTIALS_KEY

logger = logging.getLogger(__name__)

KEY_FILE_NAME = ".key"


class SecureStorage:
    """Encrypted key/value storage backed by one file per key

    Values are encrypted with Fernet before they touch the disk. The directory
    is created with 0700 and every file written with 0600 on Unix-like systems.
    """

    def __init__(self, directory: Optional[str] = None, key: Optional[str] = None):
        self.directory = Path(directory if directory else CREDENTIALS_DIR).expanduser()
        self._ensure_secure_directory()
        self._fernet = Fernet(self._resolve_key(key if key is not None else CREDENTIALS_KEY))

    def _ensure_secure_directory(self):
        """Create the storage directory with secure permissions"""
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            if platform.system() != "Windows":
                os.chmod(self.directory, 0o700)

    def _resolve_key(self, key: str) -> bytes:
        """Use the configured key, or load/generate the key file"""
        if key:
            return key.encode("ascii")

        key_path = self.directory / KEY_FILE_NAME
        if key_path.exists():
            return key_path.read_bytes().strip()

        generated = Fernet.generate_key()
        self._write_atomic(key_path, generated)
        logger.info(f"Generated new storage key at {key_path}")
        return generated

    def _path_for(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ValueError(f"Invalid storage key: {name!r}")
        return self.directory / name

    def _write_atomic(self, path: Path, data: bytes):
        """Write through a temp file and rename so readers never see a partial value"""
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            if platform.system() != "Windows":
                os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def set_item(self, name: str, value: str):
        """Encrypt and persist a value"""
        token = self._fernet.encrypt(value.encode("utf-8"))
        self._write_atomic(self._path_for(name), token)

    def get_item(self, name: str) -> Optional[str]:
        """Read and decrypt a value; undecryptable values read as missing"""
        path = self._path_for(name)
        if not path.exists():
            return None

        try:
            return self._fernet.decrypt(path.read_bytes()).decode("utf-8")
        except (InvalidToken, UnicodeDecodeError):
            logger.warning(f"Stored value for '{name}' could not be decrypted, ignoring it")
            return None

    def delete_item(self, name: str):
        """Remove a stored value if present"""
        path = self._path_for(name)
        if path.exists():
            path.unlink()

    def has_item(self, name: str) -> bool:
        return self._path_for(name).exists()
