import base64

import pytest

from conftest import API, download, page_texts, run


def modify(client, headers, file_id, *operations):
    return client.post(
        f"{API}/editor/{file_id}/modify",
        json={"operations": list(operations)},
        headers=headers,
    )


def test_modify_creates_new_file(client, auth_headers, uploaded):
    source = uploaded("contract.pdf", pages=2)
    original = download(client, auth_headers, source["id"])

    response = modify(
        client, auth_headers, source["id"],
        {"type": "addText", "pageIndex": 0, "text": "Signed", "x": 72, "y": 100},
        {"type": "addWatermark", "text": "COPY"},
        {"type": "rotatePage", "pageIndex": 1, "rotation": 90},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "PDF modified successfully"

    edited = body["data"]["file"]
    assert edited["id"] != source["id"]
    assert edited["originalFileName"] == "Edited_contract.pdf"
    assert edited["storedFileName"].startswith("edited-")
    assert edited["metadata"]["pageCount"] == 2

    texts = page_texts(download(client, auth_headers, edited["id"]))
    assert "Signed" in texts[0]
    assert all("COPY" in text for text in texts)

    # Source is never modified
    assert download(client, auth_headers, source["id"]) == original


def test_modify_deletes_pages_against_original_indices(client, auth_headers, uploaded):
    source = uploaded("three.pdf", pages=3)

    response = modify(
        client, auth_headers, source["id"],
        {"type": "deletePage", "pageIndex": 2},
        {"type": "deletePage", "pageIndex": 0},
    )
    assert response.status_code == 201

    edited = response.json()["data"]["file"]
    assert edited["metadata"]["pageCount"] == 1
    assert page_texts(download(client, auth_headers, edited["id"])) == ["page-1"]


def test_unknown_operation_is_ignored(client, auth_headers, uploaded):
    source = uploaded(pages=1)
    response = modify(client, auth_headers, source["id"], {"type": "blur", "pageIndex": 0})

    assert response.status_code == 201
    assert response.json()["data"]["file"]["metadata"]["pageCount"] == 1


def test_invalid_rotation(client, auth_headers, uploaded):
    source = uploaded(pages=1)
    response = modify(client, auth_headers, source["id"],
                      {"type": "rotatePage", "pageIndex": 0, "rotation": 45})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_page_index_out_of_range(client, auth_headers, uploaded):
    source = uploaded(pages=1)
    response = modify(client, auth_headers, source["id"],
                      {"type": "addText", "pageIndex": 5, "text": "x", "x": 0, "y": 0})

    assert response.status_code == 400


def test_deleted_or_foreign_source(client, auth_headers, other_headers, uploaded):
    source = uploaded(pages=1)
    operation = {"type": "rotatePage", "pageIndex": 0, "rotation": 90}

    assert modify(client, other_headers, source["id"], operation).status_code == 404

    client.delete(f"{API}/files/{source['id']}", headers=auth_headers)
    assert modify(client, auth_headers, source["id"], operation).status_code == 404


def test_deleting_all_pages_fails_without_new_record(client, auth_headers, uploaded, db, upload_dir):
    source = uploaded(pages=1)

    response = modify(client, auth_headers, source["id"], {"type": "deletePage", "pageIndex": 0})
    assert response.status_code == 500
    assert response.json()["error"] == "Error modifying PDF"
    assert response.json()["code"] == "PROCESSING_ERROR"

    assert run(db["files"].count_documents({})) == 1
    assert len(list(upload_dir.iterdir())) == 1


def test_empty_operations_produce_a_copy(client, auth_headers, uploaded):
    source = uploaded("plain.pdf", pages=2)

    response = modify(client, auth_headers, source["id"])
    assert response.status_code == 201

    copy = response.json()["data"]["file"]
    assert copy["id"] != source["id"]
    assert page_texts(download(client, auth_headers, copy["id"])) == ["page-0", "page-1"]


@pytest.mark.parametrize("image_type,payload", [
    ("png", b"\x89PNG\r\n\x1a\n" + b"garbage" * 10),
    ("jpg", b"\xff\xd8\xff" + b"garbage" * 10),
])
def test_corrupt_image_is_a_processing_error(client, auth_headers, uploaded, db, image_type, payload):
    source = uploaded(pages=1)

    response = modify(client, auth_headers, source["id"], {
        "type": "addImage", "pageIndex": 0,
        "imageBase64": base64.b64encode(payload).decode(), "imageType": image_type,
        "x": 10, "y": 10, "width": 50, "height": 50,
    })
    assert response.status_code == 500
    assert response.json()["code"] == "PROCESSING_ERROR"
    assert response.json()["error"] == "Error modifying PDF"
    assert run(db["files"].count_documents({})) == 1


def test_entries_without_a_known_type_are_ignored(client, auth_headers, uploaded):
    source = uploaded(pages=1)

    response = modify(client, auth_headers, source["id"],
                      "noop", 7, None, {"pageIndex": 0},
                      {"type": "rotatePage", "pageIndex": 0, "rotation": 90})
    assert response.status_code == 201
    assert response.json()["data"]["file"]["metadata"]["pageCount"] == 1
