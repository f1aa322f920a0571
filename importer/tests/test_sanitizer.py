from django.test import SimpleTestCase

from importer.sanitizer import is_broken_media_reference, sanitize_record_before_create


class IsBrokenMediaReferenceTests(SimpleTestCase):
    def test_broken(self):
        for value in (
            {"connect": []},
            {"connect": [None]},
            {"connect": [0]},
            {"connect": [5, None]},
            {"connect": [""]},
        ):
            with self.subTest(value=value):
                self.assertTrue(is_broken_media_reference(value))

    def test_not_broken(self):
        for value in (
            {"connect": [1]},
            {"connect": [1, 2]},
            {"connect": "1"},
            {"other": []},
            [],
            None,
            "connect",
        ):
            with self.subTest(value=value):
                self.assertFalse(is_broken_media_reference(value))


class SanitizeRecordBeforeCreateTests(SimpleTestCase):
    def test_removes_broken_references(self):
        record = {
            "title": "A",
            "image": {"connect": []},
            "thumbnail": {"connect": [None]},
            "cover": {"connect": [4]},
        }

        self.assertEqual(
            sanitize_record_before_create(record),
            {"title": "A", "cover": {"connect": [4]}},
        )

    def test_recurses_into_dicts_and_lists(self):
        record = {
            "meta": {"hero": {"connect": []}, "keep": 1},
            "blocks": [
                {"image": {"connect": [0]}, "text": "t"},
                [{"icon": {"connect": []}}],
            ],
        }

        self.assertEqual(
            sanitize_record_before_create(record),
            {"meta": {"keep": 1}, "blocks": [{"text": "t"}, [{}]]},
        )

    def test_does_not_mutate_input(self):
        record = {"image": {"connect": []}, "list": [{"image": {"connect": []}}]}

        sanitize_record_before_create(record)

        self.assertEqual(
            record, {"image": {"connect": []}, "list": [{"image": {"connect": []}}]}
        )

    def test_idempotent(self):
        record = {
            "title": "A",
            "image": {"connect": []},
            "nested": [{"cover": {"connect": [2]}, "bad": {"connect": [None]}}],
        }

        once = sanitize_record_before_create(record)

        self.assertEqual(sanitize_record_before_create(once), once)

    def test_scalars_pass_through(self):
        for value in (None, 1, "text", True):
            with self.subTest(value=value):
                self.assertEqual(sanitize_record_before_create(value), value)
