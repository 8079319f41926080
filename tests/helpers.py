from __future__ import annotations

from fastapi.testclient import TestClient

APPLICATION_TEXT = """Personal Information
First Name * Priya
Middle Name Kumari
Last Name Sharma
Date of Birth * 1999-04-12
First Language * Hindi
Country of Citizenship India
Address Details
Street Address * 42 MG Road
City/Town Bengaluru
Province/State * Karnataka
Postal/Zip Code 560001
Education History
Name of Institution * University of Delhi
Degree Name Bachelor of Commerce
Attended Institution From * 2017-07-01
Attended Institution To * 2020-06-30
I have graduated from this institution
Test Scores
I have GRE exam scores
"""


def register(client: TestClient, name: str, email: str, password: str = "pw", role: str | None = None) -> dict:
    body = {"name": name, "email": email, "password": password}
    if role:
        body["role"] = role
    response = client.post("/api/auth", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
