class DirectoryUnreadableError(IOError):
    """A directory could not be listed; aborts the whole collection."""


class FileIOError(IOError):
    """Reading or writing a single image failed. The run moves on."""


class UnsupportedFormatError(ValueError):
    """Target format outside {png, jpg}."""


class ImageDecodeError(ValueError):
    """Source bytes are not a decodable image."""


class PipelineBusyError(RuntimeError):
    """A conversion run is already in flight."""
