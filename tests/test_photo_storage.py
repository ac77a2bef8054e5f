"""
Photo storage tests: per-store folder resolution and photo upload naming.

All tests use the in-memory FakeDriveGateway; no Google Drive calls.
"""
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from intake_fakes import FakeDriveGateway, make_photo

from inspection_intake.drive_gateway import FOLDER_MIME_TYPE
from inspection_intake.errors import StorageBackendError, UploadError
from inspection_intake.photo_storage import (
    PhotoUploader,
    StoreFolderLocator,
    build_photo_file_name,
    photo_extension,
)

ROOT = "intake-root"
FIXED_MILLIS = 1700000000123


class TestStoreFolderLocator(unittest.TestCase):
    def test_existing_folder_reused_without_create(self):
        gateway = FakeDriveGateway(folders={(ROOT, "Metro 83"): "existing-folder"})
        locator = StoreFolderLocator(gateway)

        first = locator.resolve_store_folder(ROOT, "Metro #83!")
        second = locator.resolve_store_folder(ROOT, "Metro #83!")

        self.assertEqual(first, "existing-folder")
        self.assertEqual(second, "existing-folder")
        self.assertEqual(gateway.created_folders, [])
        self.assertEqual(
            gateway.calls[0], ("list_children", ROOT, "Metro 83", FOLDER_MIME_TYPE)
        )

    def test_missing_folder_created_once_then_found(self):
        gateway = FakeDriveGateway()
        locator = StoreFolderLocator(gateway)

        first = locator.resolve_store_folder(ROOT, "Corner Market")
        second = locator.resolve_store_folder(ROOT, "Corner Market")

        self.assertEqual(first, "folder-1")
        self.assertEqual(second, "folder-1")
        self.assertEqual(len(gateway.created_folders), 1)
        self.assertEqual(gateway.created_folders[0]["parent"], ROOT)
        self.assertEqual(gateway.created_folders[0]["name"], "Corner Market")

    def test_lookup_failure_raises_storage_error(self):
        gateway = FakeDriveGateway(fail_on={"list_children"})
        with self.assertRaises(StorageBackendError):
            StoreFolderLocator(gateway).resolve_store_folder(ROOT, "Metro")
        self.assertEqual(gateway.created_folders, [])

    def test_create_failure_raises_storage_error(self):
        gateway = FakeDriveGateway(fail_on={"create_folder"})
        with self.assertRaises(StorageBackendError):
            StoreFolderLocator(gateway).resolve_store_folder(ROOT, "Metro")

    def test_create_without_id_raises_storage_error(self):
        gateway = FakeDriveGateway(omit_ids={"create_folder"})
        with self.assertRaises(StorageBackendError):
            StoreFolderLocator(gateway).resolve_store_folder(ROOT, "Metro")


class TestPhotoNaming(unittest.TestCase):
    def test_extension_lowercased(self):
        self.assertEqual(photo_extension("IMG_0042.PNG"), "png")

    def test_missing_extension_defaults_to_jpg(self):
        self.assertEqual(photo_extension("blob"), "jpg")
        self.assertEqual(photo_extension(""), "jpg")
        self.assertEqual(photo_extension("photo."), "jpg")

    def test_client_paths_stripped(self):
        self.assertEqual(photo_extension(r"C:\my.pics\photo"), "jpg")
        self.assertEqual(photo_extension(r"C:\pics\IMG_0042.PNG"), "png")
        self.assertEqual(photo_extension("/home/me/my.pics/photo"), "jpg")

    def test_file_name_format(self):
        self.assertEqual(
            build_photo_file_name("Metro #83!", FIXED_MILLIS, "shelf.JPG"),
            "Metro 83 - 1700000000123.jpg",
        )


class TestPhotoUploader(unittest.TestCase):
    def _uploader(self, gateway, per_store_folders=True):
        return PhotoUploader(gateway, per_store_folders=per_store_folders, clock=lambda: FIXED_MILLIS)

    def test_upload_into_store_folder(self):
        gateway = FakeDriveGateway(folders={(ROOT, "Metro 83"): "metro-folder"})
        photo = make_photo(content=b"jpeg-bytes", filename="door.jpeg")

        uploaded = self._uploader(gateway).upload(photo, "Metro #83!", ROOT)

        self.assertEqual(uploaded.file_id, "file-1")
        self.assertEqual(uploaded.display_file_name, "Metro 83 - 1700000000123.jpeg")
        self.assertEqual(uploaded.view_link, "https://drive.google.com/file/d/file-1/view?usp=drivesdk")
        created = gateway.created_files[0]
        self.assertEqual(created["parent"], "metro-folder")
        self.assertEqual(created["mime_type"], "image/jpeg")
        self.assertEqual(created["content"], b"jpeg-bytes")

    def test_flat_layout_uploads_to_root_without_lookup(self):
        gateway = FakeDriveGateway()
        self._uploader(gateway, per_store_folders=False).upload(make_photo(), "Metro", ROOT)

        self.assertEqual([c[0] for c in gateway.calls], ["create_file"])
        self.assertEqual(gateway.created_files[0]["parent"], ROOT)

    def test_missing_mime_type_defaults_to_jpeg(self):
        gateway = FakeDriveGateway()
        self._uploader(gateway).upload(make_photo(content_type=""), "Metro", ROOT)
        self.assertEqual(gateway.created_files[0]["mime_type"], "image/jpeg")

    def test_view_link_synthesized_when_missing(self):
        gateway = FakeDriveGateway(omit_view_link=True)
        uploaded = self._uploader(gateway).upload(make_photo(), "Metro", ROOT)
        self.assertEqual(uploaded.view_link, "https://drive.google.com/file/d/file-1/view")

    def test_create_failure_raises_upload_error(self):
        gateway = FakeDriveGateway(fail_on={"create_file"})
        with self.assertRaises(UploadError):
            self._uploader(gateway).upload(make_photo(), "Metro", ROOT)

    def test_create_without_id_raises_upload_error(self):
        gateway = FakeDriveGateway(omit_ids={"create_file"})
        with self.assertRaises(UploadError):
            self._uploader(gateway).upload(make_photo(), "Metro", ROOT)

    def test_folder_failure_propagates_unchanged(self):
        gateway = FakeDriveGateway(fail_on={"list_children"})
        with self.assertRaises(StorageBackendError):
            self._uploader(gateway).upload(make_photo(), "Metro", ROOT)
        self.assertEqual(gateway.created_files, [])


if __name__ == "__main__":
    unittest.main()
