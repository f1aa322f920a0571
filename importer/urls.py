from django.urls import path

from importer import views

app_name = "importer"

urlpatterns = [
    path("import/<slug:content_type>/", views.import_data, name="import-data"),
    path(
        "import-json/<slug:content_type>/",
        views.import_json_data,
        name="import-json-data",
    ),
    path("upload-file/<slug:content_type>/", views.upload_file, name="upload-file"),
    path(
        "import-local-file/<slug:content_type>/",
        views.import_local_file,
        name="import-local-file",
    ),
]
