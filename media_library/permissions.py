import secrets

from rest_framework.permissions import BasePermission

from importer.config import get_upload_token


class HasUploadToken(BasePermission):
    """
    Requires ``Authorization: Bearer <token>`` when an upload token is
    configured. Without a configured token the endpoint is public.
    """

    message = "A valid upload token is required."

    def has_permission(self, request, view):
        token = get_upload_token()
        if not token:
            return True

        header = request.META.get("HTTP_AUTHORIZATION", "")
        scheme, _, supplied = header.partition(" ")
        if scheme.lower() != "bearer" or not supplied:
            return False
        return secrets.compare_digest(supplied.strip(), token)
