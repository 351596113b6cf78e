"""Errors raised while bootstrapping the interpreter."""


class RomLoadError(Exception):
    """Base class for ROM loading failures."""


class RomUnreadableError(RomLoadError):
    """ROM file is missing or could not be read completely."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"ROM file '{filename}' is invalid or does not exist: {reason}")
        self.filename = filename


class RomTooLargeError(RomLoadError):
    """ROM image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"ROM is {size} bytes, exceeding the {max_size} byte memory limit")
        self.size = size
        self.max_size = max_size
