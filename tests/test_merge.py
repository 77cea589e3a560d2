from pymongo.errors import PyMongoError

from conftest import API, download, page_texts, run


def merge(client, headers, file_ids, name="Combined"):
    return client.post(
        f"{API}/merge",
        json={"fileIds": file_ids, "operationName": name},
        headers=headers,
    )


def test_merge_preserves_request_order(client, auth_headers, uploaded):
    first = uploaded("a.pdf", pages=2, label="a")
    second = uploaded("b.pdf", pages=3, label="b")

    response = merge(client, auth_headers, [first["id"], second["id"]], name="Quarterly")
    assert response.status_code == 201
    data = response.json()["data"]

    merged = data["mergedFile"]
    assert merged["originalFileName"] == "Quarterly.pdf"
    assert merged["storedFileName"].startswith("merged-")
    assert merged["metadata"]["pageCount"] == 5
    assert page_texts(download(client, auth_headers, merged["id"])) == [
        "a-0", "a-1", "b-0", "b-1", "b-2",
    ]

    operation = data["mergeOperation"]
    assert operation["operationName"] == "Quarterly"
    assert operation["status"] == "completed"
    assert operation["mergeConfiguration"]["fileOrder"] == ["a.pdf", "b.pdf"]
    assert operation["mergeConfiguration"]["totalPages"] == 5
    assert [f["id"] for f in operation["sourceFileIds"]] == [first["id"], second["id"]]
    assert operation["mergedFileId"]["id"] == merged["id"]


def test_reversed_order(client, auth_headers, uploaded):
    first = uploaded("a.pdf", pages=1, label="a")
    second = uploaded("b.pdf", pages=1, label="b")

    merged = merge(client, auth_headers, [second["id"], first["id"]]).json()["data"]["mergedFile"]
    assert page_texts(download(client, auth_headers, merged["id"])) == ["b-0", "a-0"]


def test_merge_needs_two_files(client, auth_headers, uploaded, db):
    only = uploaded()

    response = merge(client, auth_headers, [only["id"]])
    assert response.status_code == 400
    assert response.json()["error"] == "At least 2 files are required for merging"
    assert run(db["merge_operations"].count_documents({})) == 0
    assert run(db["files"].count_documents({})) == 1


def test_merge_needs_name(client, auth_headers, uploaded, db):
    ids = [uploaded("a.pdf")["id"], uploaded("b.pdf")["id"]]

    response = merge(client, auth_headers, ids, name="   ")
    assert response.status_code == 400
    assert response.json()["error"] == "Operation name is required"
    assert run(db["merge_operations"].count_documents({})) == 0


def test_merge_rejects_foreign_and_deleted_files(client, auth_headers, other_headers, uploaded):
    mine = uploaded("mine.pdf")
    other = uploaded("other.pdf")

    assert merge(client, other_headers, [mine["id"], other["id"]]).status_code == 404

    client.delete(f"{API}/files/{other['id']}", headers=auth_headers)
    response = merge(client, auth_headers, [mine["id"], other["id"]])
    assert response.status_code == 404
    assert response.json()["error"] == "One or more files not found"


def test_merge_missing_binary(client, auth_headers, uploaded, upload_dir, db):
    first = uploaded("a.pdf")
    second = uploaded("b.pdf")
    (upload_dir / second["storedFileName"]).unlink()

    response = merge(client, auth_headers, [first["id"], second["id"]])
    assert response.status_code == 404
    assert response.json()["error"] == "File b.pdf not found on disk"
    assert run(db["merge_operations"].count_documents({})) == 0
    assert run(db["files"].count_documents({})) == 2


def test_history_survives_source_deletion(client, auth_headers, other_headers, uploaded):
    first = uploaded("a.pdf")
    second = uploaded("b.pdf")
    operation = merge(client, auth_headers, [first["id"], second["id"]]).json()["data"]["mergeOperation"]

    client.delete(f"{API}/files/{first['id']}", headers=auth_headers)

    history = client.get(f"{API}/merge/history", headers=auth_headers).json()["data"]
    assert history["count"] == 1
    [entry] = history["operations"]
    assert entry["id"] == operation["id"]
    assert entry["sourceFileIds"][0]["status"] == "deleted"

    detail = client.get(f"{API}/merge/{operation['id']}", headers=auth_headers)
    assert detail.status_code == 200

    assert client.get(f"{API}/merge/history", headers=other_headers).json()["data"]["count"] == 0
    assert client.get(f"{API}/merge/{operation['id']}", headers=other_headers).status_code == 404


def test_annotations(client, auth_headers, uploaded):
    ids = [uploaded("a.pdf")["id"], uploaded("b.pdf")["id"]]
    merge_id = merge(client, auth_headers, ids).json()["data"]["mergeOperation"]["id"]
    url = f"{API}/merge/{merge_id}/annotate"

    response = client.post(
        url,
        json={"type": "highlight", "content": "check totals", "position": {"x": 10, "y": 20, "page": 1}},
        headers=auth_headers,
    )
    assert response.status_code == 200
    [annotation] = response.json()["data"]["operation"]["annotations"]
    assert annotation["type"] == "highlight"
    assert annotation["content"] == "check totals"
    assert annotation["position"] == {"x": 10, "y": 20, "page": 1}

    invalid = client.post(url, json={"type": "scribble"}, headers=auth_headers)
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "Invalid annotation type"

    unknown = client.post(
        f"{API}/merge/64b7f0c2a1b2c3d4e5f60718/annotate",
        json={"type": "text"},
        headers=auth_headers,
    )
    assert unknown.status_code == 404

    detail = client.get(f"{API}/merge/{merge_id}", headers=auth_headers).json()["data"]["operation"]
    assert len(detail["annotations"]) == 1


def test_failed_operation_record_rolls_back_merged_file(client, auth_headers, uploaded, upload_dir, db, monkeypatch):
    from app.services import merge_service

    class FailingCollection:
        async def insert_one(self, document):
            raise PyMongoError("write failed")

    ids = [uploaded("a.pdf")["id"], uploaded("b.pdf")["id"]]
    monkeypatch.setattr(merge_service, "get_merge_operations_collection", lambda: FailingCollection())

    response = merge(client, auth_headers, ids)
    assert response.status_code == 500
    assert response.json()["error"] == "Error merging PDFs"

    assert run(db["files"].count_documents({})) == 2
    assert len(list(upload_dir.iterdir())) == 2
