import json

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from catalog.logging import CatalogLogger
from media_library import services
from media_library.exceptions import MediaUploadError
from media_library.permissions import HasUploadToken

structured_logger = CatalogLogger.get_logger(__name__)


def _parse_file_info(raw):
    if not raw:
        return {}
    file_info = json.loads(raw)
    if not isinstance(file_info, dict):
        raise ValueError("fileInfo must be a JSON object")
    return {
        "name": file_info.get("name") or "",
        "alternative_text": file_info.get("alternativeText") or "",
        "caption": file_info.get("caption") or "",
    }


@api_view(["POST"])
@parser_classes([MultiPartParser, FormParser])
@permission_classes([HasUploadToken])
def upload(request):
    """
    Public upload endpoint for the media library

    Accepts one or more files in the ``files`` field and an optional
    ``fileInfo`` JSON object applied to each of them.
    """
    files = request.FILES.getlist("files")
    if not files:
        return Response(
            {"error": "No files were uploaded"}, status=status.HTTP_400_BAD_REQUEST
        )

    try:
        file_info = _parse_file_info(request.data.get("fileInfo"))
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError subclass
        return Response(
            {"error": f"Invalid fileInfo: {exc}"}, status=status.HTTP_400_BAD_REQUEST
        )

    uploaded = []
    for uploaded_file in files:
        try:
            media_file = services.upload_file(uploaded_file, file_info)
        except MediaUploadError as exc:
            structured_logger.warning(
                "Rejected media upload.",
                event_code="media_upload_rejected",
                reason=str(exc),
                reason_code="invalid_file",
                filename=uploaded_file.name,
            )
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        uploaded.append(services.serialize_media_file(media_file))

    return Response(uploaded, status=status.HTTP_201_CREATED)
