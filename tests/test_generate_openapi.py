import json

from task_tracker.generate_openapi import generate_openapi


def test_writes_schema_with_routes_and_tags(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))

    with open(out, encoding="utf-8") as f:
        schema = json.load(f)

    assert schema["info"]["title"] == "Task Tracker"
    assert "/api/v1/users" in schema["paths"]
    assert "/api/v1/todos/{todo_id}/complete" in schema["paths"]
    assert {t["name"] for t in schema["tags"]} >= {"health", "users", "todos"}
