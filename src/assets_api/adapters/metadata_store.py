"""
Metadata store gateway: asset documents in a DynamoDB table partitioned by visibility.

Table layout:
    HASH  visibility
    RANGE id
    LSI   createdAt-index (visibility, createdAt) for newest-first partition queries

Every point operation needs both the id and the partition value.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from assets_api.aws_clients import get_dynamodb_resource
from assets_api.errors import DependencyError, NotFoundError
from assets_api.settings import Settings
from assets_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

PARTITION_KEY = "visibility"
SORT_KEY = "id"
CREATED_AT_INDEX = "createdAt-index"


def _is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


@contextmanager
def _translate_dynamodb_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (BotoCoreError, ClientError) as e:
        logger.error(f"DynamoDB {operation} failed: {str(e)}")
        raise DependencyError(str(e)) from e


def _from_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """DynamoDB hands numbers back as Decimal; assets only hold integers."""
    return {
        key: int(value) if isinstance(value, Decimal) else value
        for key, value in item.items()
    }


class MetadataStore:
    """CRUD over asset documents. No secondary indexes beyond createdAt, no transactions."""

    def __init__(self, dynamodb_resource: Any, table_name: str):
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table = dynamodb_resource.Table(table_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MetadataStore":
        return cls(
            dynamodb_resource=get_dynamodb_resource(settings),
            table_name=settings.metadata_table_name,
        )

    @log_execution_time
    def create_table_if_absent(self) -> bool:
        """Create the table and its createdAt index. Returns True if it was created."""
        try:
            table = self.dynamodb.create_table(
                TableName=self.table_name,
                KeySchema=[
                    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
                    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
                    {"AttributeName": SORT_KEY, "AttributeType": "S"},
                    {"AttributeName": "createdAt", "AttributeType": "S"},
                ],
                LocalSecondaryIndexes=[
                    {
                        "IndexName": CREATED_AT_INDEX,
                        "KeySchema": [
                            {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
                            {"AttributeName": "createdAt", "KeyType": "RANGE"},
                        ],
                        "Projection": {"ProjectionType": "ALL"},
                    }
                ],
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ResourceInUseException":
                logger.info(f"DynamoDB table already exists: {self.table_name}")
                return False
            raise DependencyError(str(e)) from e

        table.wait_until_exists()
        logger.info(f"Created DynamoDB table: {self.table_name}")
        return True

    @log_execution_time
    def insert(self, document: Dict[str, Any]) -> None:
        """Insert a new document. Refuses to overwrite an existing (visibility, id)."""
        with _translate_dynamodb_errors("put_item"):
            self.table.put_item(
                Item=document,
                ConditionExpression=Attr(SORT_KEY).not_exists(),
            )

    @log_execution_time
    def query_by_partition(self, visibility: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Documents ordered by ``createdAt``, newest first.

        With a visibility, a single-partition query against the createdAt index.
        Without one, a full scan merged and sorted here.
        """
        items: List[Dict[str, Any]] = []
        with _translate_dynamodb_errors("query" if visibility else "scan"):
            if visibility:
                request: Dict[str, Any] = {
                    "IndexName": CREATED_AT_INDEX,
                    "KeyConditionExpression": Key(PARTITION_KEY).eq(visibility),
                    "ScanIndexForward": False,
                }
                fetch = self.table.query
            else:
                request = {}
                fetch = self.table.scan

            while True:
                response = fetch(**request)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                request["ExclusiveStartKey"] = last_key

        documents = [_from_item(item) for item in items]
        if not visibility:
            documents.sort(key=lambda doc: doc.get("createdAt", ""), reverse=True)
        return documents

    @log_execution_time
    def point_read(self, asset_id: str, visibility: str) -> Optional[Dict[str, Any]]:
        with _translate_dynamodb_errors("get_item"):
            response = self.table.get_item(Key={PARTITION_KEY: visibility, SORT_KEY: asset_id})
        item = response.get("Item")
        return _from_item(item) if item is not None else None

    @log_execution_time
    def replace(self, asset_id: str, visibility: str, document: Dict[str, Any]) -> None:
        """Overwrite the whole document at (id, visibility). The coordinates always win over the body."""
        item = {**document, PARTITION_KEY: visibility, SORT_KEY: asset_id}
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression=Attr(SORT_KEY).exists(),
            )
        except ClientError as e:
            if _is_conditional_check_failure(e):
                raise NotFoundError(asset_id, visibility) from e
            logger.error(f"DynamoDB put_item failed: {str(e)}")
            raise DependencyError(str(e)) from e
        except BotoCoreError as e:
            logger.error(f"DynamoDB put_item failed: {str(e)}")
            raise DependencyError(str(e)) from e

    @log_execution_time
    def delete(self, asset_id: str, visibility: str) -> None:
        with _translate_dynamodb_errors("delete_item"):
            self.table.delete_item(Key={PARTITION_KEY: visibility, SORT_KEY: asset_id})
