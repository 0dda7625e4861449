from pathlib import Path


class FileError(Exception):
    def __init__(self, path, reason):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")

class NotAFileError(FileError):
    def __init__(self, path):
        super().__init__(path, "Path denotes a directory, not a file")

class DirectoryCreationError(FileError):
    def __init__(self, path):
        super().__init__(path, "Could not create directory")

class FileCreationError(FileError):
    def __init__(self, path):
        super().__init__(path, "Could not create file")

class OpenFailedError(FileError):
    def __init__(self, path):
        super().__init__(path, "Could not open file for writing")

class DeleteFailedError(FileError):
    def __init__(self, path):
        super().__init__(path, "Could not delete file")
