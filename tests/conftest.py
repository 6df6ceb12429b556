"""Shared fixtures for the Graph tool tests."""

import json
from typing import List
from unittest.mock import AsyncMock

import pytest

from graph_mcp.catalog import EndpointDescriptor, ParameterLocation, ParameterSpec


def text_response(payload) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"content": [{"type": "text", "text": text}]}


@pytest.fixture
def graph_client() -> AsyncMock:
    """Transport double; graph_request returns an empty collection by default."""
    client = AsyncMock()
    client.graph_request.return_value = text_response({"value": []})
    return client


@pytest.fixture
def get_item() -> EndpointDescriptor:
    return EndpointDescriptor(
        name="getItem",
        method="GET",
        path="/items/{id}",
        parameters=(ParameterSpec("id", ParameterLocation.PATH, {"type": "string"}, required=True),),
        description="Get one item",
    )


@pytest.fixture
def list_messages() -> EndpointDescriptor:
    return EndpointDescriptor(
        name="list-mail-messages",
        method="GET",
        path="/me/messages",
        parameters=(
            ParameterSpec("filter", ParameterLocation.QUERY, {"type": "string"}),
            ParameterSpec("top", ParameterLocation.QUERY, {"type": "integer"}),
            ParameterSpec("select", ParameterLocation.QUERY, {"type": "array"}),
            ParameterSpec("includeHidden", ParameterLocation.QUERY, {"type": "boolean"}),
            ParameterSpec("ConsistencyLevel", ParameterLocation.HEADER, {"type": "string"}),
        ),
    )


@pytest.fixture
def send_mail() -> EndpointDescriptor:
    return EndpointDescriptor(
        name="send-mail",
        method="post",
        path="/me/sendMail",
        parameters=(
            ParameterSpec(
                "body",
                ParameterLocation.BODY,
                {"type": "object", "properties": {"message": {"type": "object"}}},
                required=True,
            ),
        ),
    )


@pytest.fixture
def mixed_catalog(get_item, list_messages, send_mail) -> List[EndpointDescriptor]:
    delete_item = EndpointDescriptor(
        name="deleteItem",
        method="DELETE",
        path="/items/{id}",
        parameters=(ParameterSpec("id", ParameterLocation.PATH, required=True),),
    )
    return [get_item, list_messages, send_mail, delete_item]
