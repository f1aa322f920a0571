from unittest import mock

from django.core.cache import caches
from django.test import TestCase, override_settings

from configuration.models import Configuration
from importer.config import get_batch_size, get_upload_token, importer_setting


class ImporterSettingTests(TestCase):
    def test_configured_value(self):
        self.assertEqual(importer_setting("IMAGE_CONCURRENCY"), 4)

    @override_settings(IMPORTER={"BATCH_SIZE": 10})
    def test_missing_keys_fall_back_to_defaults(self):
        self.assertEqual(importer_setting("BATCH_SIZE"), 10)
        self.assertEqual(importer_setting("DOWNLOAD_TIMEOUT"), 15)
        self.assertEqual(importer_setting("MAX_IMAGE_SIZE"), 10 * 1024 * 1024)


class UploadTokenTests(TestCase):
    def setUp(self):
        caches["configuration_cache"].clear()

    def set_configured_token(self, value):
        config = Configuration.objects.get(key="upload_token")
        config.value = value
        config.save()

    @mock.patch.dict("os.environ", {}, clear=True)
    def test_no_token(self):
        self.assertIsNone(get_upload_token())

    @mock.patch.dict("os.environ", {}, clear=True)
    def test_configured_token(self):
        self.set_configured_token("from-config")
        self.assertEqual(get_upload_token(), "from-config")

    @mock.patch.dict("os.environ", {"CATALOG_UPLOAD_TOKEN": "from-env"})
    def test_environment_wins(self):
        self.set_configured_token("from-config")
        self.assertEqual(get_upload_token(), "from-env")

    @override_settings(IMPORTER={"UPLOAD_TOKEN_ENV": "OTHER_TOKEN"})
    @mock.patch.dict("os.environ", {"OTHER_TOKEN": "other"}, clear=True)
    def test_environment_variable_name_is_configurable(self):
        self.assertEqual(get_upload_token(), "other")


class BatchSizeTests(TestCase):
    def setUp(self):
        caches["configuration_cache"].clear()
        self.config = Configuration.objects.get(key="import_batch_size")

    def set_batch_size(self, value):
        self.config.value = value
        self.config.save()

    def test_seeded_value(self):
        self.assertEqual(get_batch_size(), 50)

    def test_configured_value(self):
        self.set_batch_size("12")
        self.assertEqual(get_batch_size(), 12)

    def test_clamped(self):
        self.set_batch_size("500")
        self.assertEqual(get_batch_size(), 50)
        self.set_batch_size("-3")
        self.assertEqual(get_batch_size(), 1)

    def test_fractional_value_is_truncated(self):
        self.set_batch_size("7.9")
        self.assertEqual(get_batch_size(), 7)

    @override_settings(IMPORTER={"BATCH_SIZE": 20})
    def test_setting_is_used_without_configuration(self):
        self.config.delete()
        self.assertEqual(get_batch_size(), 20)
