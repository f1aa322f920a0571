class MediaUploadError(Exception):
    """
    Raised when a file cannot be stored in the media library.
    """

    pass
