from tests.helpers import API


def test_health_check(client):
    response = client.get(f"{API}/")

    assert response.status_code == 200
    assert response.json() == {"message": "Daily Tasks API is running!"}


def test_index_serves_client_ui(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'id="auth-form"' in response.text
    assert 'id="task-list"' in response.text


def test_openapi_lists_versioned_routes(client):
    paths = client.get("/openapi.json").json()["paths"]

    assert f"{API}/auth/register" in paths
    assert f"{API}/tasks/rollover" in paths
    assert f"{API}/tasks/{{task_id}}" in paths
