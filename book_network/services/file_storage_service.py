# book_network/services/file_storage_service.py
from __future__ import annotations

import os
import time

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename


class FileStorageService:
    @staticmethod
    def _root() -> str:
        return current_app.config["UPLOAD_FOLDER"]

    @staticmethod
    def _extension(filename: str | None) -> str:
        name = secure_filename(filename or "")
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[1].lower()

    @staticmethod
    def store(file: FileStorage, owner) -> str:
        """
        Save an uploaded file under ``users/<owner>/`` and return its reference.

        The reference is the path relative to UPLOAD_FOLDER. OSError from the
        filesystem is not caught.
        """
        owner_dir = secure_filename(str(owner)) or "anonymous"
        relative_dir = os.path.join("users", owner_dir)
        target_dir = os.path.join(FileStorageService._root(), relative_dir)
        os.makedirs(target_dir, exist_ok=True)

        ext = FileStorageService._extension(file.filename)
        name = f"{time.time_ns()}.{ext}" if ext else str(time.time_ns())
        reference = os.path.join(relative_dir, name)

        file.save(os.path.join(FileStorageService._root(), reference))
        current_app.logger.info(f"[storage] saved file reference={reference}")
        return reference

    @staticmethod
    def read(reference: str | None) -> bytes | None:
        if not reference:
            return None
        path = os.path.join(FileStorageService._root(), reference)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            current_app.logger.warning(f"[storage] file not found reference={reference}")
            return None

    @staticmethod
    def delete(reference: str | None) -> None:
        if not reference:
            return
        path = os.path.join(FileStorageService._root(), reference)
        try:
            os.remove(path)
            current_app.logger.info(f"[storage] deleted file reference={reference}")
        except FileNotFoundError:
            current_app.logger.warning(f"[storage] file not found reference={reference}")
