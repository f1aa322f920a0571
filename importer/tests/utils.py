import threading
from io import BytesIO
from unittest import mock

from PIL import Image

from importer.retrieval import AssetDescriptor
from importer.uploader import UploadedMedia


def create_png_bytes(size=(4, 3)):
    buf = BytesIO()
    Image.new("RGB", size, color="red").save(buf, format="PNG")
    return buf.getvalue()


PNG_BYTES = create_png_bytes()


def create_asset(content=PNG_BYTES, filename="0123abcd.png", mime_type="image/png"):
    return AssetDescriptor(
        content=content, filename=filename, mime_type=mime_type, size=len(content)
    )


def create_response(status_code=200, content=PNG_BYTES, headers=None):
    """
    Build a mock of a streamed requests.Response
    """
    resp = mock.MagicMock()
    resp.status_code = status_code
    resp.headers = {"Content-Type": "image/png"} if headers is None else headers

    def iter_content(chunk_size=1):
        step = chunk_size or len(content) or 1
        for start in range(0, len(content), step):
            yield content[start : start + step]

    resp.iter_content.side_effect = iter_content
    return resp


class FakeContentStore:
    """
    In-memory content store which can be told to reject given records
    """

    def __init__(self, content_types=("article",), fail_when=None):
        self.content_types = set(content_types)
        self.fail_when = fail_when
        self.created = []
        self.lock = threading.Lock()

    def has_content_type(self, content_type_id):
        return content_type_id in self.content_types

    def create(self, content_type_id, data):
        if self.fail_when is not None:
            error = self.fail_when(data)
            if error is not None:
                raise error
        with self.lock:
            self.created.append((content_type_id, data))
        return data


class FakeMediaLibrary:
    """
    Stands in for the download and upload steps of the image resolver
    """

    def __init__(self, failing_urls=(), failing_uploads=(), first_id=1):
        self.failing_urls = set(failing_urls)
        self.failing_uploads = set(failing_uploads)
        self.next_id = first_id
        self.downloads = []
        self.uploads = []
        self.lock = threading.Lock()

    def download(self, url):
        with self.lock:
            self.downloads.append(url)
        if url in self.failing_urls:
            return None
        return create_asset(filename=url.rsplit("/", 1)[-1])

    def upload(self, asset, caption=None):
        with self.lock:
            self.uploads.append((asset.filename, caption))
            if asset.filename in self.failing_uploads:
                return None
            media_id = self.next_id
            self.next_id += 1
        return UploadedMedia(id=media_id, name=asset.stem)
