"""
Tests for the HTTP surface.

Status mapping: 200 success, 422 validation, 404 not found, 409 business
rule violation, 500 fault.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contentcore.adapters.memory import InMemoryCatalogRepo
from contentcore.api.deps import get_context
from contentcore.api.routes import content, designs
from contentcore.app_shell.context import ServiceContext
from contentcore.domain.entities import DesignVersion, Template

# --- Test Setup ---


@pytest.fixture
def app(ctx) -> FastAPI:
    """Test app wired to the in-memory context."""
    app = FastAPI()
    app.include_router(content.router, prefix="/api")
    app.include_router(designs.router, prefix="/api/designs")
    app.dependency_overrides[get_context] = lambda: ctx
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def seeded(ctx, make_version):
    version = make_version()
    ctx.memory.versions[42] = [version]
    return version


def _body(editor_id, **overrides) -> dict:
    body = {
        "title": "About",
        "content": '<div contenteditable="true" data-ccms-ceid="R1">Edited</div>',
        "editor_id": str(editor_id),
    }
    body.update(overrides)
    return body


# --- Save ---


class TestSaveContent:
    def test_success(self, client, seeded, editor_id) -> None:
        response = client.put("/api/content/42", json=_body(editor_id))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["article_number"] == 42
        assert data["new_version_number"] == 2
        assert data["cdn_results"] == []

    def test_published_save_reports_cdn_results(self, client, seeded, editor_id) -> None:
        response = client.put(
            "/api/content/42", json=_body(editor_id, published_at="2024-06-01T09:00:00Z")
        )

        assert response.status_code == 200
        assert response.json()["cdn_results"] == [
            {"provider": "logging", "paths": ["/about"], "success": True, "message": ""}
        ]

    def test_validation_failure(self, client, seeded, editor_id) -> None:
        response = client.put("/api/content/42", json=_body(editor_id, title="  "))

        assert response.status_code == 422
        assert "title" in response.json()["detail"]["errors"]

    def test_not_found(self, client, editor_id) -> None:
        response = client.put("/api/content/99", json=_body(editor_id))
        assert response.status_code == 404

    def test_reserved_path_is_conflict(self, app, rules, clock, make_version, editor_id) -> None:
        rules.redirects.reserved_paths = ["admin"]
        strict = ServiceContext.create(rules, clock=clock)
        strict.memory.versions[42] = [make_version()]
        app.dependency_overrides[get_context] = lambda: strict

        response = TestClient(app).put(
            "/api/content/42", json=_body(editor_id, url_path="admin/x")
        )

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "reserved_path"


# --- Catalog ---


def test_catalog_lists_saved_rows(client, seeded, editor_id) -> None:
    client.put("/api/content/42", json=_body(editor_id))

    response = client.get("/api/catalog")

    assert response.status_code == 200
    rows = response.json()
    assert [(r["article_number"], r["title"], r["status"]) for r in rows] == [
        (42, "About", "Active")
    ]


# --- Designs ---


class TestPublishDesign:
    def test_not_found(self, client, editor_id) -> None:
        response = client.post(
            f"/api/designs/{uuid4()}/publish", json={"editor_id": str(editor_id)}
        )
        assert response.status_code == 404

    def test_publish(self, client, ctx, editor_id) -> None:
        template = Template(title="T", content="<div></div>")
        design = DesignVersion(template_id=template.id, content="<main></main>")
        ctx.memory.templates[template.id] = template
        ctx.memory.designs[design.id] = design

        response = client.post(
            f"/api/designs/{design.id}/publish", json={"editor_id": str(editor_id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["template_id"] == str(template.id)
        assert data["updated"] == []
        assert data["failed"] == []

    def test_listing_failure_is_server_error(self, client, ctx, editor_id, monkeypatch):
        template = Template(title="T", content="<div></div>")
        design = DesignVersion(template_id=template.id, content="<main></main>")
        ctx.memory.templates[template.id] = template
        ctx.memory.designs[design.id] = design

        async def broken_listing(self, template_id):
            raise RuntimeError("catalog storage down")

        monkeypatch.setattr(InMemoryCatalogRepo, "list_by_template", broken_listing)

        response = client.post(
            f"/api/designs/{design.id}/publish", json={"editor_id": str(editor_id)}
        )

        assert response.status_code == 500
        assert "storage down" not in response.text
