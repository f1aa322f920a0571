import json
import os
import tempfile
import threading
import time
from unittest import mock

from django.core.cache import caches
from django.test import SimpleTestCase, TestCase

from configuration.models import Configuration
from importer import orchestrator
from importer.exceptions import (
    ImportFileNotFound,
    InvalidImportFile,
    InvalidImportRequest,
    UnknownContentType,
)
from importer.orchestrator import Importer, batched, get_importer
from importer.resolver import ImageResolver
from importer.results import ImportResult, RecordError
from importer.stores import DjangoContentStore

from .utils import FakeContentStore, FakeMediaLibrary


class BatchedTests(SimpleTestCase):
    def test_contiguous_slices(self):
        records = list(range(120))
        batches = list(batched(records, 50))
        self.assertEqual([offset for offset, _ in batches], [0, 50, 100])
        self.assertEqual([len(batch) for _, batch in batches], [50, 50, 20])
        self.assertEqual(batches[2][1], list(range(100, 120)))

    def test_empty(self):
        self.assertEqual(list(batched([], 50)), [])


class ImporterTests(SimpleTestCase):
    def setUp(self):
        self.store = FakeContentStore()
        self.library = FakeMediaLibrary(first_id=42)
        self.resolver = ImageResolver(
            download=self.library.download, upload=self.library.upload
        )

    def get_importer(self, batch_size=50):
        return Importer(self.store, self.resolver, batch_size=batch_size)

    def test_invalid_batch_size(self):
        for batch_size in (0, 51, -1, "10", None):
            with self.subTest(batch_size=batch_size):
                with self.assertRaises(ValueError):
                    self.get_importer(batch_size=batch_size)

    def test_invalid_parameters(self):
        importer = self.get_importer()
        for content_type, records in (
            ("", [{}]),
            (None, [{}]),
            ("article", None),
            ("article", {"title": "A"}),
            ("article", "[]"),
        ):
            with self.subTest(content_type=content_type, records=records):
                with self.assertRaisesMessage(
                    InvalidImportRequest,
                    "Invalid parameters: contentType and data array are required",
                ):
                    importer.import_data(content_type, records)
        self.assertEqual(self.store.created, [])

    def test_unknown_content_type(self):
        with self.assertRaisesMessage(
            UnknownContentType, 'Content type "recipe" not found'
        ):
            self.get_importer().import_data("recipe", [{"title": "A"}])
        self.assertEqual(self.store.created, [])
        self.assertEqual(self.library.downloads, [])

    def test_empty_records(self):
        result = self.get_importer().import_data("article", [])
        self.assertEqual(result, ImportResult(content_type="article", total_records=0))

    def test_image_is_resolved_before_create(self):
        result = self.get_importer().import_data(
            "article", [{"title": "A", "image": "https://ex.com/p.png"}]
        )

        self.assertEqual(
            self.store.created,
            [("article", {"title": "A", "image": {"connect": [42]}})],
        )
        self.assertEqual(result.successful, 1)
        self.assertEqual(result.failed, 0)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.processed_images, 1)

    def test_download_failure_keeps_original_value(self):
        self.library.failing_urls.add("https://ex.com/p.png")

        result = self.get_importer().import_data(
            "article", [{"title": "A", "image": "https://ex.com/p.png"}]
        )

        self.assertEqual(
            self.store.created,
            [("article", {"title": "A", "image": "https://ex.com/p.png"})],
        )
        self.assertEqual(result.successful, 1)
        self.assertEqual(result.failed, 0)
        self.assertEqual(result.processed_images, 0)

    def test_failing_record_is_isolated(self):
        def fail_when(data):
            if data["n"] == 2:
                return ValueError("title must be unique")

        self.store.fail_when = fail_when

        result = self.get_importer().import_data(
            "article", [{"n": i} for i in range(5)]
        )

        self.assertEqual(result.successful, 4)
        self.assertEqual(result.failed, 1)
        self.assertEqual(
            result.errors, [RecordError(index=2, message="title must be unique")]
        )
        self.assertEqual(
            sorted(data["n"] for _, data in self.store.created), [0, 1, 3, 4]
        )

    def test_exception_without_message(self):
        self.store.fail_when = lambda data: RuntimeError()

        result = self.get_importer().import_data("article", [{"title": "A"}])

        self.assertEqual(result.errors, [RecordError(index=0, message="Unknown error")])

    def test_resolver_errors_are_record_failures(self):
        self.resolver = mock.MagicMock()
        self.resolver.resolve.side_effect = [
            ({"n": 0}, 0),
            RuntimeError("resolver exploded"),
        ]

        result = self.get_importer(batch_size=1).import_data(
            "article", [{"n": 0}, {"n": 1}]
        )

        self.assertEqual(result.successful, 1)
        self.assertEqual(
            result.errors, [RecordError(index=1, message="resolver exploded")]
        )

    def test_records_are_sanitized(self):
        self.resolver = mock.MagicMock()
        self.resolver.resolve.return_value = (
            {"title": "A", "image": {"connect": []}},
            0,
        )

        self.get_importer().import_data("article", [{"title": "A"}])

        self.assertEqual(self.store.created, [("article", {"title": "A"})])

    def test_batches_of_fifty(self):
        def fail_when(data):
            if data["n"] % 7 == 0:
                return ValueError(f"rejected {data['n']}")

        self.store.fail_when = fail_when
        importer = self.get_importer(batch_size=50)
        records = [{"n": i} for i in range(120)]

        with mock.patch.object(
            importer, "run_batch", wraps=importer.run_batch
        ) as mock_run_batch:
            result = importer.import_data("article", records)

        self.assertEqual(
            [(c.args[1], len(c.args[2])) for c in mock_run_batch.call_args_list],
            [(0, 50), (50, 50), (100, 20)],
        )
        failing = [i for i in range(120) if i % 7 == 0]
        self.assertEqual(result.total_records, 120)
        self.assertEqual(result.failed, len(failing))
        self.assertEqual(result.successful, 120 - len(failing))
        self.assertEqual([error.index for error in result.errors], failing)
        self.assertEqual(
            [error.message for error in result.errors],
            [f"rejected {i}" for i in failing],
        )

    def test_error_order_does_not_depend_on_completion_order(self):
        def fail_when(data):
            # Earlier records finish last
            time.sleep((5 - data["n"]) * 0.01)
            return ValueError(str(data["n"]))

        self.store.fail_when = fail_when

        result = self.get_importer().import_data(
            "article", [{"n": i} for i in range(5)]
        )

        self.assertEqual([error.index for error in result.errors], [0, 1, 2, 3, 4])

    def test_records_of_a_batch_run_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        def fail_when(data):
            barrier.wait()

        self.store.fail_when = fail_when

        result = self.get_importer(batch_size=3).import_data(
            "article", [{"n": i} for i in range(3)]
        )

        self.assertEqual(result.successful, 3)

    def test_batches_run_sequentially(self):
        in_flight = []
        peak = []
        lock = threading.Lock()

        def fail_when(data):
            with lock:
                in_flight.append(data["n"])
                peak.append(len(in_flight))
            time.sleep(0.01)
            with lock:
                in_flight.remove(data["n"])

        self.store.fail_when = fail_when

        result = self.get_importer(batch_size=2).import_data(
            "article", [{"n": i} for i in range(6)]
        )

        self.assertEqual(result.successful, 6)
        self.assertLessEqual(max(peak), 2)

    def test_counts_always_add_up(self):
        self.store.fail_when = lambda data: (
            ValueError("odd") if data["n"] % 2 else None
        )

        result = self.get_importer(batch_size=4).import_data(
            "article", [{"n": i} for i in range(11)]
        )

        self.assertEqual(result.successful + result.failed, result.total_records)
        self.assertEqual(len(result.errors), result.failed)
        indexes = [error.index for error in result.errors]
        self.assertEqual(len(set(indexes)), len(indexes))
        self.assertTrue(all(0 <= i < result.total_records for i in indexes))


class ImportFromFileTests(SimpleTestCase):
    def setUp(self):
        self.store = FakeContentStore()
        self.importer = Importer(
            self.store, ImageResolver(download=lambda url: None, upload=mock.Mock())
        )
        self.tempdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tempdir.cleanup)

    def write(self, content, name="records.json"):
        path = os.path.join(self.tempdir.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_imports_array(self):
        path = self.write(json.dumps([{"title": "Á"}, {"title": "B"}]))

        result = self.importer.import_from_file("article", path)

        self.assertEqual(result.successful, 2)
        self.assertEqual(self.store.created[0][1]["title"], "Á")

    def test_missing_file(self):
        path = os.path.join(self.tempdir.name, "missing.json")
        with self.assertRaisesMessage(ImportFileNotFound, f"File not found: {path}"):
            self.importer.import_from_file("article", path)

    def test_invalid_json(self):
        path = self.write("[{]")
        with self.assertRaisesMessage(InvalidImportFile, "Invalid JSON file: "):
            self.importer.import_from_file("article", path)

    def test_invalid_utf8(self):
        path = os.path.join(self.tempdir.name, "latin1.json")
        with open(path, "wb") as f:
            f.write(b'["\xff\xfe"]')

        with self.assertRaisesMessage(InvalidImportFile, "File is not valid UTF-8"):
            self.importer.import_from_file("article", path)
        self.assertEqual(self.store.created, [])

    def test_directory(self):
        with self.assertRaisesMessage(InvalidImportFile, "Unable to read file"):
            self.importer.import_from_file("article", self.tempdir.name)
        self.assertEqual(self.store.created, [])

    def test_not_an_array(self):
        path = self.write('{"title": "A"}')
        with self.assertRaisesMessage(
            InvalidImportFile, "File content must be a JSON array"
        ):
            self.importer.import_from_file("article", path)
        self.assertEqual(self.store.created, [])

    def test_unknown_content_type(self):
        path = self.write("[]")
        with self.assertRaises(UnknownContentType):
            self.importer.import_from_file("recipe", path)


class GetImporterTests(TestCase):
    def setUp(self):
        caches["configuration_cache"].clear()

    def test_wiring(self):
        importer = get_importer()
        self.assertIsInstance(importer.content_store, DjangoContentStore)
        self.assertIsInstance(importer.resolver, ImageResolver)
        self.assertEqual(importer.batch_size, 50)

    def test_batch_size_from_configuration(self):
        config = Configuration.objects.get(key="import_batch_size")
        config.value = "10"
        config.save()

        self.assertEqual(get_importer().batch_size, 10)

    def test_explicit_batch_size(self):
        self.assertEqual(get_importer(batch_size=5).batch_size, 5)

    @mock.patch("importer.orchestrator.get_importer")
    def test_module_level_functions(self, mock_get_importer):
        orchestrator.import_data("article", [])
        mock_get_importer.return_value.import_data.assert_called_once_with(
            "article", []
        )

        orchestrator.import_from_file("article", "/tmp/records.json")
        mock_get_importer.return_value.import_from_file.assert_called_once_with(
            "article", "/tmp/records.json"
        )
