import json

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from catalog.logging import CatalogLogger
from importer import orchestrator
from importer.exceptions import ImportPreconditionError

structured_logger = CatalogLogger.get_logger(__name__)


def bad_request(message):
    return Response({"error": message}, status=status.HTTP_400_BAD_REQUEST)


def run_import(content_type, records, **extra):
    """
    Import ``records`` and wrap the outcome in the response envelope

    Failed records still produce a 200; only failures before any record is
    processed are reported as client errors.
    """
    structured_logger.info(
        "Received import request.",
        event_code="import_requested",
        content_type=content_type,
        records_count=len(records),
    )
    try:
        result = orchestrator.import_data(content_type, records)
    except ImportPreconditionError as exc:
        structured_logger.warning(
            "Rejected import request.",
            event_code="import_rejected",
            reason=str(exc),
            reason_code=exc.reason_code,
            content_type=content_type,
        )
        return bad_request(str(exc))

    return Response({"success": True, **extra, "result": result.as_dict()})


@api_view(["POST"])
@parser_classes([JSONParser])
def import_data(request, content_type):
    records = request.data.get("data") if isinstance(request.data, dict) else None
    if not isinstance(records, list):
        return bad_request('Request body must contain a "data" array')

    return run_import(content_type, records)


@api_view(["POST"])
@parser_classes([JSONParser, FormParser])
def import_json_data(request, content_type):
    json_data = request.data.get("jsonData") if hasattr(request.data, "get") else None
    if not json_data or not isinstance(json_data, str):
        return bad_request('Request body must contain a "jsonData" string field')

    try:
        records = json.loads(json_data)
    except json.JSONDecodeError as exc:
        return bad_request(f"Invalid JSON: {exc}")

    if not isinstance(records, list):
        return bad_request("JSON data must be an array")

    return run_import(content_type, records)


@api_view(["POST"])
@parser_classes([MultiPartParser])
def upload_file(request, content_type):
    """
    Import the JSON array held in the first uploaded file
    """
    if not request.FILES:
        return bad_request("No files uploaded. Please upload a JSON file in form-data.")

    field_name = next(iter(request.FILES))
    uploaded_file = request.FILES[field_name]

    try:
        records = json.loads(uploaded_file.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return bad_request(f"Invalid JSON in file: {exc}")

    if not isinstance(records, list):
        return bad_request("File must contain a JSON array of records")

    return run_import(
        content_type,
        records,
        file=uploaded_file.name,
        recordsCount=len(records),
    )


@api_view(["POST"])
@parser_classes([JSONParser])
def import_local_file(request, content_type):
    """
    Import the JSON array stored in a file on the server
    """
    file_path = None
    if isinstance(request.data, dict):
        file_path = request.data.get("filePath")
    if not file_path or not isinstance(file_path, str):
        return bad_request('Request body must contain a "filePath" string field')

    try:
        result = orchestrator.import_from_file(content_type, file_path)
    except ImportPreconditionError as exc:
        structured_logger.warning(
            "Rejected local file import.",
            event_code="import_rejected",
            reason=str(exc),
            reason_code=exc.reason_code,
            content_type=content_type,
            path=file_path,
        )
        return bad_request(str(exc))

    return Response({"success": True, "result": result.as_dict()})
