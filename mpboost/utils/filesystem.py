#!filepath: mpboost/utils/filesystem.py
import gzip
import os
from pathlib import Path
from typing import IO

from mpboost.utils.logger import logs


class FileSystem:
    """
    File system helpers
    - create directories on demand
    - atomic writes (tmp file -> rename)
    - append / truncate text files
    - open plain or gzip input
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created dir: {p}")
        return p

    @staticmethod
    def file_exists(path: str | Path) -> bool:
        return Path(path).exists()

    @staticmethod
    def get_file_size(path: str | Path) -> int:
        p = Path(path)
        if not p.exists():
            return 0
        return p.stat().st_size

    @staticmethod
    def format_size(size_bytes: int) -> str:
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size_bytes < 1024:
                return f"{size_bytes:.2f} {unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f} PB"

    @staticmethod
    def safe_write_text(path: str | Path, text: str) -> None:
        """
        Atomic write (no half-written report on failure):
            1) write to <path>.tmp
            2) rename -> path
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_name(path.name + ".tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(text)
            logs.debug(f"[FS] wrote tmp file: {tmp_path}")

        FileSystem.replace(tmp_path, path)

    @staticmethod
    def replace(src: str | Path, dst: str | Path) -> None:
        os.replace(src, dst)
        logs.debug(f"[FS] atomic rename done: {src} -> {dst}")

    @staticmethod
    def truncate(path: str | Path) -> None:
        path = Path(path)
        FileSystem.ensure_dir(path.parent)
        path.write_text("", encoding="utf-8")

    @staticmethod
    def append_text(path: str | Path, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    @staticmethod
    def open_bytes(path: str | Path) -> IO[bytes]:
        """
        Open an input for binary line reading, transparently decompressing *.gz.
        Decoding is left to the caller so it can report the offending line.
        """
        p = Path(path)
        if p.suffix == ".gz":
            return gzip.open(p, "rb")
        return open(p, "rb")

    @staticmethod
    def remove(path: str | Path) -> None:
        p = Path(path)

        if not p.exists():
            logs.debug(f"[FS] path does not exist, nothing to remove: {p}")
            return

        p.unlink()
        logs.debug(f"[FS] removed file: {p}")
