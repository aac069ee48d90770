"""Onboarding: one-time role selection, profile status and profile setup."""


def test_profile_status_for_new_account(client, make_user):
    headers = make_user("new@x.com")

    r = client.post("/onboarding/profile-status", headers=headers)

    assert r.status_code == 200
    user = r.json()["user"]
    assert user["role"] is None
    assert user["has_selected_role"] is False
    assert user["profile_completed"] is False


def test_select_role(client, make_user):
    headers = make_user("s@x.com")

    r = client.post("/onboarding/select-role", json={"role": "student"}, headers=headers)

    assert r.status_code == 200
    assert r.json()["user"]["role"] == "student"
    assert r.json()["user"]["has_selected_role"] is True


def test_role_can_only_be_selected_once(client, make_user):
    headers = make_user("s@x.com", role="student")

    r = client.post("/onboarding/select-role", json={"role": "sponsor"}, headers=headers)

    assert r.status_code == 400
    assert "already selected your role as student" in r.json()["message"]


def test_admin_role_cannot_be_self_selected(client, make_user):
    headers = make_user("a@x.com")

    r = client.post("/onboarding/select-role", json={"role": "admin"}, headers=headers)

    assert r.status_code == 400
    assert r.json()["message"] == "Invalid role. Must be 'student' or 'sponsor'"


def test_profile_setup_requires_role(client, make_user):
    headers = make_user("norole@x.com")

    r = client.post("/onboarding/profile-setup", json={"full_name": "X"}, headers=headers)

    assert r.status_code == 400


def test_student_profile_setup_reports_missing_fields(client, make_user):
    headers = make_user("s@x.com", role="student")

    r = client.post("/onboarding/profile-setup", json={"full_name": "Ana"}, headers=headers)

    assert r.status_code == 400
    message = r.json()["message"]
    assert "gender" in message and "date_of_birth" in message and "contact_number" in message


def test_sponsor_profile_setup_completes_profile(client, make_user):
    headers = make_user("sp@x.com", role="sponsor", complete_profile=True)

    r = client.post("/onboarding/profile-status", headers=headers)

    assert r.json()["user"]["profile_completed"] is True
    assert r.json()["user"]["role"] == "sponsor"
