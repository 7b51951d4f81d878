"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the product handler,
including API Gateway events, a mocked DynamoDB client and a small
in-memory DynamoDB client double.
"""

from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any
from uuid import uuid4

import pytest
from botocore.exceptions import ClientError

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


TEST_TABLE_NAME = 'products-test'

_OK = {'ResponseMetadata': {'HTTPStatusCode': 200, 'RetryAttempts': 0}}


class InMemoryDynamoDBClient:
    """In-memory stand-in for the low-level DynamoDB client.

    Supports only the calls and expression forms the product repository
    issues. Items are kept in their typed attribute form.
    """

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get_item(self, TableName: str, Key: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(('get_item', {'TableName': TableName, 'Key': Key}))
        item = self.items.get(Key['id']['S'])
        response = copy.deepcopy(_OK)
        if item is not None:
            response['Item'] = copy.deepcopy(item)
        return response

    def scan(self, TableName: str) -> dict[str, Any]:
        self.calls.append(('scan', {'TableName': TableName}))
        items = [copy.deepcopy(item) for item in self.items.values()]
        return {'Items': items, 'Count': len(items), **copy.deepcopy(_OK)}

    def query(self, TableName: str, **params: Any) -> dict[str, Any]:
        self.calls.append(('query', {'TableName': TableName, **params}))
        values = params['ExpressionAttributeValues']
        item = self.items.get(values[':productId']['S'])
        needle = values[':category']['S']
        matches = []
        if item is not None and needle in item.get('category', {}).get('S', ''):
            matches.append(copy.deepcopy(item))
        return {'Items': matches, 'Count': len(matches), **copy.deepcopy(_OK)}

    def put_item(self, TableName: str, Item: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(('put_item', {'TableName': TableName, 'Item': Item}))
        self.items[Item['id']['S']] = copy.deepcopy(Item)
        return copy.deepcopy(_OK)

    def delete_item(self, TableName: str, Key: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(('delete_item', {'TableName': TableName, 'Key': Key}))
        self.items.pop(Key['id']['S'], None)
        return copy.deepcopy(_OK)

    def update_item(self, TableName: str, **params: Any) -> dict[str, Any]:
        self.calls.append(('update_item', {'TableName': TableName, **params}))
        clause = params['UpdateExpression'].removeprefix('SET').strip()
        if not clause:
            raise ClientError(
                {
                    'Error': {
                        'Code': 'ValidationException',
                        'Message': 'Invalid UpdateExpression: Syntax error',
                    }
                },
                'UpdateItem',
            )
        product_id = params['Key']['id']['S']
        item = self.items.setdefault(product_id, copy.deepcopy(params['Key']))
        for assignment in clause.split(','):
            name_token, value_token = (part.strip() for part in assignment.split('='))
            field = params['ExpressionAttributeNames'][name_token]
            item[field] = copy.deepcopy(params['ExpressionAttributeValues'][value_token])
        return copy.deepcopy(_OK)


# --- Store Fixtures ---


@pytest.fixture
def dynamodb_client() -> InMemoryDynamoDBClient:
    """Empty in-memory DynamoDB client."""
    return InMemoryDynamoDBClient()


@pytest.fixture
def mock_dynamodb_client(mocker):
    """MagicMock DynamoDB client returning empty successful responses."""
    client = mocker.MagicMock()
    client.get_item.return_value = dict(_OK)
    client.scan.return_value = {'Items': [], **_OK}
    client.query.return_value = {'Items': [], **_OK}
    client.put_item.return_value = dict(_OK)
    client.delete_item.return_value = dict(_OK)
    client.update_item.return_value = dict(_OK)
    return client


@pytest.fixture
def mock_boto3_client(mocker):
    """Mock boto3 client for AWS service calls."""
    mock = mocker.patch('boto3.client')
    return mock


@pytest.fixture
def product_repository(dynamodb_client):
    """Product repository backed by the in-memory client."""
    from app.db.repositories import ProductRepository

    return ProductRepository(dynamodb_client, TEST_TABLE_NAME)


@pytest.fixture
def product_router(product_repository):
    """Product router backed by the in-memory client."""
    from app.api.products import ProductRouter

    return ProductRouter(product_repository)


@pytest.fixture
def table_env(monkeypatch):
    """Configure the table name and reset process-wide caches."""
    from app.api.products import clear_router_cache
    from app.services.aws_clients import clear_client_cache
    from app.settings import clear_settings_cache

    monkeypatch.setenv('DYNAMODB_TABLE_NAME', TEST_TABLE_NAME)
    clear_settings_cache()
    clear_client_cache()
    clear_router_cache()
    yield TEST_TABLE_NAME
    clear_settings_cache()
    clear_client_cache()
    clear_router_cache()


# --- API Event Fixtures ---


@pytest.fixture
def api_gateway_event() -> dict:
    """Base API Gateway event structure."""
    return {
        'httpMethod': 'GET',
        'path': '/products',
        'resource': '/products',
        'pathParameters': None,
        'queryStringParameters': None,
        'multiValueQueryStringParameters': None,
        'headers': {},
        'requestContext': {
            'requestId': str(uuid4()),
        },
        'body': None,
        'isBase64Encoded': False,
    }


@pytest.fixture
def make_event(api_gateway_event):
    """Factory copying the base event and applying overrides."""

    def _make(**overrides: Any) -> dict:
        event = copy.deepcopy(api_gateway_event)
        event.update(overrides)
        return event

    return _make
