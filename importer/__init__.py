"""
Design
======

The importer loads JSON arrays of records into the site's content types.

General goals:

* One bad record never stops an import; every failure is reported with the
  record's position in the submitted array
* Image URLs found anywhere in a record are stored in the media library and
  replaced by media references before the record is saved
* A broken image never fails its record; the original value is kept

The import process works like this:

1. A caller submits a content type and a list of records, either through one
   of the HTTP endpoints, the ``import_records`` management command or a JSON
   file on the server.
2. The records are split into batches of at most 50. Batches run in order and
   the records of a batch are processed concurrently.
3. For each record, every string (or ``{"url": ...}`` object) which looks like
   an image URL is downloaded and uploaded to the media library, with up to
   four images of a record in flight at once. Successful images are replaced by
   ``{"connect": [media_id]}``.
4. Media references left empty are stripped and the record is created in the
   content store.
5. The caller receives an ImportResult with the number of successful and
   failed records and an error message for each failed record.
"""
