from __future__ import annotations

import pytest

from dispatchify.generation.profile import GenerationProfile


@pytest.fixture()
def minimal_openapi_document() -> dict[str, object]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Example", "version": "1.0.0"},
        "paths": {},
    }


@pytest.fixture()
def profile() -> GenerationProfile:
    return GenerationProfile.from_version("3.12")


@pytest.fixture()
def petstore_document() -> dict[str, object]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Petstore", "version": "1.0.0"},
        "components": {
            "schemas": {
                "Pet": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
                },
                "Error": {"type": "object", "properties": {"message": {"type": "string"}}},
            }
        },
        "paths": {
            "/pets": {
                "get": {
                    "operationId": "listPets",
                    "responses": {
                        "200": {
                            "description": "ok",
                            "content": {
                                "application/json": {
                                    "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
                                }
                            },
                        },
                        "default": {
                            "description": "error",
                            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}},
                        },
                    },
                },
                "post": {
                    "operationId": "createPet",
                    "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                    "responses": {
                        "201": {
                            "description": "created",
                            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                        },
                        "4XX": {
                            "description": "client error",
                            "content": {"application/xml": {"schema": {"$ref": "#/components/schemas/Error"}}},
                        },
                    },
                },
            },
            "/pets/{petId}": {
                "delete": {
                    "operationId": "deletePet",
                    "responses": {"204": {"description": "deleted"}},
                },
            },
        },
    }
