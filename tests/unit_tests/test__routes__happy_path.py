import logging
import re

import boto3
from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import (
    TEST_BUCKET_NAME,
    TEST_PDF_CONTENT,
    TEST_PDF_CONTENT_TYPE,
    TEST_PDF_NAME,
    TEST_TEXT_CONTENT,
    TEST_TEXT_CONTENT_TYPE,
)

UUID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


def upload(client: TestClient, file_name: str = TEST_PDF_NAME, **form) -> dict:
    response = client.post(
        "/files",
        files={"file": (file_name, TEST_PDF_CONTENT, TEST_PDF_CONTENT_TYPE)},
        data=form,
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_root_and_health(client: TestClient):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text

    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"ok": True}


def test_upload_file__defaults(client: TestClient):
    asset = upload(client)

    assert asset["visibility"] == "private"
    assert asset["title"] == TEST_PDF_NAME
    assert asset["fileName"] == TEST_PDF_NAME
    assert asset["mimeType"] == TEST_PDF_CONTENT_TYPE
    assert asset["size"] == len(TEST_PDF_CONTENT)
    assert asset["id"]
    assert re.fullmatch(f"{UUID_PATTERN}-notes\\.pdf", asset["blobName"])
    assert asset["blobName"] == f"{asset['id']}-{TEST_PDF_NAME}"
    assert asset["blobUrl"].endswith(asset["blobName"])
    assert asset["createdAt"] == asset["updatedAt"]


def test_upload_file__writes_blob_with_content_type(client: TestClient):
    asset = upload(client)

    s3_client = boto3.client("s3")
    obj = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key=asset["blobName"])
    assert obj["Body"].read() == TEST_PDF_CONTENT
    assert obj["ContentType"] == TEST_PDF_CONTENT_TYPE


def test_upload_file__title_and_visibility(client: TestClient):
    asset = upload(client, title="  Week 1 notes  ", visibility="PUBLIC")

    assert asset["visibility"] == "public"
    assert asset["title"] == "Week 1 notes"


def test_upload_file__invalid_visibility_falls_back_to_private(client: TestClient):
    asset = upload(client, visibility="secret")
    assert asset["visibility"] == "private"


def test_upload_file__blank_title_uses_file_name(client: TestClient):
    asset = upload(client, title="   ")
    assert asset["title"] == TEST_PDF_NAME


def test_upload_file__spaces_in_file_name(client: TestClient):
    asset = upload(client, file_name="lecture  notes final.pdf")

    assert asset["fileName"] == "lecture  notes final.pdf"
    assert asset["blobName"] == f"{asset['id']}-lecture_notes_final.pdf"


def test_upload_file__twice_creates_two_assets(client: TestClient):
    first = upload(client)
    second = upload(client)
    assert first["id"] != second["id"]
    assert first["blobName"] != second["blobName"]


def test_list_files__filter_and_order(client: TestClient):
    public_old = upload(client, file_name="a.pdf", visibility="public")
    private_mid = upload(client, file_name="b.pdf")
    public_new = upload(client, file_name="c.pdf", visibility="public")

    response = client.get("/files", params={"visibility": "public"})
    assert response.status_code == status.HTTP_200_OK
    assert [asset["id"] for asset in response.json()] == [public_new["id"], public_old["id"]]

    response = client.get("/files", params={"visibility": "private"})
    assert [asset["id"] for asset in response.json()] == [private_mid["id"]]

    response = client.get("/files")
    assert response.status_code == status.HTTP_200_OK
    assert [asset["id"] for asset in response.json()] == [
        public_new["id"],
        private_mid["id"],
        public_old["id"],
    ]


def test_list_files__empty(client: TestClient):
    response = client.get("/files")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_get_file(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.get(f"/files/{asset['id']}", params={"visibility": "public"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == asset


def test_get_file__visibility_defaults_to_private(client: TestClient):
    asset = upload(client)

    response = client.get(f"/files/{asset['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == asset["id"]


def test_get_file__wrong_visibility_is_not_found(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.get(f"/files/{asset['id']}", params={"visibility": "private"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.get(f"/files/{asset['id']}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_update_title(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.put(
        f"/files/{asset['id']}",
        json={"visibility": "public", "title": "  Renamed  "},
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["title"] == "Renamed"
    assert updated["updatedAt"] > asset["updatedAt"]
    assert updated["createdAt"] == asset["createdAt"]

    response = client.get(f"/files/{asset['id']}", params={"visibility": "public"})
    assert response.json() == updated


def test_update_without_title_only_touches_updated_at(client: TestClient):
    asset = upload(client, title="Keep me")

    response = client.put(f"/files/{asset['id']}", params={"visibility": "private"})
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["title"] == "Keep me"
    assert updated["updatedAt"] > asset["updatedAt"]

    response = client.put(f"/files/{asset['id']}", json={"visibility": "private", "title": "   "})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Keep me"
    assert response.json()["updatedAt"] > updated["updatedAt"]


def test_update_body_visibility_wins_over_query(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.put(
        f"/files/{asset['id']}",
        params={"visibility": "private"},
        json={"visibility": "public", "title": "From body"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["visibility"] == "public"


def test_update_cannot_move_asset_between_partitions(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.put(f"/files/{asset['id']}", json={"visibility": "private", "title": "Moved?"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.get(f"/files/{asset['id']}", params={"visibility": "public"})
    assert response.json()["title"] == TEST_PDF_NAME


def test_delete_file(client: TestClient):
    asset = upload(client, visibility="public")

    response = client.delete(f"/files/{asset['id']}", params={"visibility": "public"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": True, "id": asset["id"]}

    # the asset should not be found if it was deleted
    response = client.get(f"/files/{asset['id']}", params={"visibility": "public"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    s3_client = boto3.client("s3")
    listed = s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)
    assert asset["blobName"] not in [obj["Key"] for obj in listed.get("Contents", [])]


def test_delete_file_twice_is_not_found(client: TestClient):
    asset = upload(client)

    response = client.delete(f"/files/{asset['id']}", params={"visibility": "private"})
    assert response.status_code == status.HTTP_200_OK

    response = client.delete(f"/files/{asset['id']}", params={"visibility": "private"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_upload_text_file(client: TestClient):
    response = client.post(
        "/files",
        files={"file": ("hello.txt", TEST_TEXT_CONTENT, TEST_TEXT_CONTENT_TYPE)},
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["mimeType"] == TEST_TEXT_CONTENT_TYPE
    assert response.json()["size"] == len(TEST_TEXT_CONTENT)


def test_bucket_created_once_across_uploads(client: TestClient, caplog):
    with caplog.at_level(logging.INFO, logger="assets_api.adapters.object_store"):
        for name in ["a.pdf", "b.pdf", "c.pdf"]:
            upload(client, file_name=name)

    created = [r for r in caplog.records if "Created S3 bucket" in r.getMessage()]
    assert len(created) == 1


def test_upload_title_falls_back_to_trimmed_file_name(client: TestClient):
    asset = upload(client, file_name=f" {TEST_PDF_NAME} ")
    assert asset["title"] == TEST_PDF_NAME
