import io
import shutil
import tempfile
import unittest
import zipfile

from fastapi.testclient import TestClient

from qrbatch.core.config import Settings
from qrbatch.main import create_app

class TestApi(unittest.TestCase):
    def setUp(self):
        self.dir = tempfile.mkdtemp()
        self.cfg = Settings(storage_dir=self.dir, extraction_mode="numeric", qr_box_size=2, qr_border=1)
        self.client = TestClient(create_app(self.cfg))

    def tearDown(self):
        shutil.rmtree(self.dir, ignore_errors=True)

    def upload(self, name, body, **form):
        return self.client.post("/api/files", files={"file": (name, body, "application/octet-stream")}, data=form)

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")

    def test_upload_text_file(self):
        r = self.upload("numbers.txt", b"order 001 and 1 and 1500 foo 1500")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["tokens"], ["001", "1500"])
        self.assertEqual(body["message"], "2 tokens found")
        self.assertEqual(body["file"]["index"], 0)

        state = self.client.get("/api/state").json()
        self.assertEqual(state["active_index"], 0)
        self.assertEqual(state["files"][0]["token_count"], 2)
        self.assertEqual(state["active_tokens"], ["001", "1500"])
        self.assertFalse(state["loading"])

    def test_upload_very_long_number(self):
        huge = "9" * 5000
        r = self.upload("big.txt", f"{huge} 123".encode())
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["tokens"], ["123", huge])

    def test_upload_line_mode_override(self):
        r = self.upload("names.txt", b"a\n\nb \nb\nc", mode="line")
        self.assertEqual(r.json()["tokens"], ["a", "b", "c"])

    def test_decode_failure(self):
        r = self.upload("broken.xlsx", b"not a workbook")
        self.assertEqual(r.status_code, 422)
        self.assertEqual(self.client.get("/api/files").json(), [])

    def test_remove_and_select(self):
        self.upload("a.txt", b"111")
        self.upload("b.txt", b"222")
        self.assertEqual(self.client.post("/api/files/0/select").json()["active_index"], 0)
        r = self.client.delete("/api/files/0")
        self.assertEqual(r.json(), {"deleted": "a.txt", "active_index": None})
        self.assertEqual(self.client.delete("/api/files/5").status_code, 404)
        self.assertEqual(self.client.post("/api/files/9/select").status_code, 404)
        self.assertIsNone(self.client.delete("/api/selection").json()["active_index"])

    def test_get_file(self):
        self.upload("a.txt", b"333 111")
        r = self.client.get("/api/files/0")
        self.assertEqual(r.json()["tokens"], ["111", "333"])
        self.assertEqual(self.client.get("/api/files/1").status_code, 404)

    def test_file_archive(self):
        self.upload("list.csv", b"id\n101\n202\n")
        r = self.client.get("/api/files/0/archive")
        self.assertEqual(r.status_code, 200)
        self.assertIn('filename="list.csv_QR_Codes.zip"', r.headers["content-disposition"])
        with zipfile.ZipFile(io.BytesIO(r.content)) as zf:
            self.assertEqual(zf.namelist(), ["QR_101.png", "QR_202.png"])

    def test_archive_without_tokens(self):
        self.upload("empty.txt", b"nothing here")
        self.assertEqual(self.client.get("/api/files/0/archive").status_code, 404)
        self.assertEqual(self.client.get("/api/manual/archive").status_code, 404)

    def test_single_qr_and_copy(self):
        self.upload("a.txt", b"4780001")
        r = self.client.get("/api/tokens/4780001/qr.png")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.headers["content-type"], "image/png")
        self.assertIn("QR_4780001.png", r.headers["content-disposition"])

        r = self.client.get("/api/tokens/4780001/text")
        self.assertEqual(r.text, "4780001")
        self.assertEqual(self.client.get("/api/tokens/999/qr.png").status_code, 404)

    def test_manual_tokens(self):
        r = self.client.post("/api/manual", json={"token": "123"})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["tokens"], ["123"])
        self.assertEqual(self.client.post("/api/manual", json={"token": "123"}).status_code, 409)
        self.assertEqual(self.client.post("/api/manual", json={"token": "12a"}).status_code, 400)
        self.assertEqual(self.client.get("/api/manual").json(), ["123"])

        r = self.client.get("/api/manual/archive")
        self.assertIn('filename="manual_QR_Codes.zip"', r.headers["content-disposition"])

        self.assertEqual(self.client.delete("/api/manual/999").json(), {"deleted": "999"})
        self.client.delete("/api/manual/123")
        self.assertEqual(self.client.get("/api/manual").json(), [])

    def test_extract_preview_is_stateless(self):
        r = self.client.post("/api/extract", json={"text": "x\ny\nx", "mode": "line"})
        self.assertEqual(r.json(), {"mode": "line", "tokens": ["x", "y"]})
        self.assertEqual(self.client.get("/api/files").json(), [])

    def test_state_rehydrated_by_new_app(self):
        self.upload("a.txt", b"555")
        self.client.post("/api/manual", json={"token": "777"})
        other = TestClient(create_app(self.cfg))
        state = other.get("/api/state").json()
        self.assertEqual([f["name"] for f in state["files"]], ["a.txt"])
        self.assertEqual(state["manual_tokens"], ["777"])
        self.assertEqual(state["active_index"], 0)

if __name__ == "__main__":
    unittest.main()
