"""Pytest configuration for apiterm tests."""

import pytest
from loguru import logger

from apiterm.cli.models import (
    Endpoint,
    MediaTypeInfo,
    ParameterInfo,
    RequestBodyInfo,
    ResponseInfo,
    SchemaInfo,
    TagGroup,
)

# Tests never write log files; drop every sink including loguru's default stderr one.
logger.remove()


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))


def make_endpoint(method: str, path: str, summary: str | None = None, **kwargs) -> Endpoint:
    return Endpoint(id=f"{method}:{path}", method=method, path=path, summary=summary, **kwargs)  # type: ignore[arg-type]


@pytest.fixture
def pet_schema() -> SchemaInfo:
    return SchemaInfo(
        type="object",
        display_type="object",
        ref_name="Pet",
        properties={
            "id": SchemaInfo(type="integer", display_type="integer", format="int64"),
            "name": SchemaInfo(type="string", display_type="string", description="Pet name", example="doggie"),
            "tag": SchemaInfo(type="string", display_type="string"),
        },
        required=["id", "name"],
    )


@pytest.fixture
def petstore_groups(pet_schema: SchemaInfo) -> list[TagGroup]:
    list_pets = make_endpoint(
        "get",
        "/pets",
        "List all pets",
        tags=["pets"],
        parameters=[
            ParameterInfo(name="limit", location="query", schema=SchemaInfo(type="integer", display_type="integer")),
        ],
        responses=[
            ResponseInfo(
                status_code="200",
                description="A list of pets",
                content=[
                    MediaTypeInfo(
                        "application/json",
                        SchemaInfo(type="array", display_type="Pet[]", items=pet_schema),
                    )
                ],
            )
        ],
    )
    create_pet = make_endpoint(
        "post",
        "/pets",
        "Create a pet",
        tags=["pets"],
        request_body=RequestBodyInfo(content=[MediaTypeInfo("application/json", pet_schema)], required=True),
        responses=[ResponseInfo(status_code="201", description="Created")],
    )
    inventory = make_endpoint("get", "/store/inventory", "Returns pet inventories", tags=["store"])
    return [
        TagGroup(name="pets", endpoints=[list_pets, create_pet]),
        TagGroup(name="store", endpoints=[inventory]),
    ]


@pytest.fixture
def endpoint_factory():
    return make_endpoint
