"""Profile read/update and profile picture storage."""

from pathlib import Path


def test_get_profile_includes_role_profile(client, make_user):
    headers = make_user("s@x.com", role="student", complete_profile=True)

    r = client.get("/profile/profile", headers=headers)

    assert r.status_code == 200
    body = r.json()
    assert body["user"]["email"] == "s@x.com"
    assert body["student"]["full_name"] == "Juan Dela Cruz"
    assert body["sponsor"] is None


def test_update_profile_changes_only_given_fields(client, make_user):
    headers = make_user("sp@x.com", role="sponsor", complete_profile=True)

    r = client.put("/profile/profile", json={"contact_number": "09999999999"}, headers=headers)

    assert r.status_code == 200
    sponsor = r.json()["sponsor"]
    assert sponsor["contact_number"] == "09999999999"
    assert sponsor["organization_name"] == "Bayanihan Foundation"


def test_update_profile_before_setup_is_404(client, make_user):
    headers = make_user("s@x.com", role="student")

    r = client.put("/profile/profile", json={"full_name": "Ana"}, headers=headers)

    assert r.status_code == 404


def test_upload_and_replace_profile_picture(client, make_user, blob_store):
    headers = make_user("pic@x.com", role="student", complete_profile=True)

    r = client.post(
        "/profile/profile/picture",
        files={"profilePicture": ("me.png", b"\x89PNG first", "image/png")},
        headers=headers,
    )
    assert r.status_code == 200
    first_url = r.json()["profile_url"]
    assert first_url.startswith("http://testserver/uploads/profiles/")
    first_path = Path(blob_store.root) / blob_store.name_from_url(first_url)
    assert first_path.read_bytes() == b"\x89PNG first"

    r = client.post(
        "/profile/profile/picture",
        files={"profilePicture": ("me2.jpg", b"jpeg second", "image/jpeg")},
        headers=headers,
    )
    second_url = r.json()["profile_url"]
    assert second_url != first_url
    assert second_url.endswith(".jpg")
    assert not first_path.exists()


def test_profile_picture_must_be_an_image(client, make_user):
    headers = make_user("pic@x.com", role="student")

    r = client.post(
        "/profile/profile/picture",
        files={"profilePicture": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert r.status_code == 400
    assert r.json()["message"] == "Only image files are allowed"


def test_delete_profile_picture(client, make_user, blob_store):
    headers = make_user("pic@x.com", role="student")
    url = client.post(
        "/profile/profile/picture",
        files={"profilePicture": ("me.png", b"png", "image/png")},
        headers=headers,
    ).json()["profile_url"]

    r = client.delete("/profile/profile/picture", headers=headers)

    assert r.status_code == 200
    assert not (Path(blob_store.root) / blob_store.name_from_url(url)).exists()
    assert client.get("/profile/profile", headers=headers).json()["user"]["profile_url"] is None
    assert client.delete("/profile/profile/picture", headers=headers).status_code == 404
