from django.db import migrations


def populate_configuration(apps, schema_editor):
    Configuration = apps.get_model("configuration", "Configuration")

    initial_data = [
        {
            "key": "upload_token",
            "data_type": "secret",
            "value": "",
            "description": "Bearer token sent by the importer when it falls back to "
            "the public media upload endpoint, and required by that endpoint when "
            "set. The CATALOG_UPLOAD_TOKEN environment variable takes priority.",
        },
        {
            "key": "import_batch_size",
            "data_type": "number",
            "value": "50",
            "description": "Number of records imported concurrently in each batch. "
            "Must be between 1 and 50.",
        },
    ]

    for entry in initial_data:
        Configuration.objects.get_or_create(key=entry["key"], defaults=entry)


def revert_populate_configuration(apps, schema_editor):
    # Values may have been edited since, so they are left in place
    pass


class Migration(migrations.Migration):

    dependencies = [
        ("configuration", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(populate_configuration, revert_populate_configuration),
    ]
