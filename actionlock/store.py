'''
The stores are the only boundary the lock client depends on. A store
has to provide three operations with the following guarantees:

* conditional_insert - create the record only if it does not exist (atomic)
* consistent_get     - a strongly consistent point read
* delete             - an unconditional remove

Each of them raises ConditionFailed or StoreError on failure, so the
client never has to know about the errors of the underlying backend.
'''
from copy import deepcopy
from threading import Lock

import boto3
from boto3.dynamodb.types import TypeSerializer, TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConditionFailed, StoreError

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class LockStore(object):
    ''' The interface every lock store has to implement. '''

    def conditional_insert(self, table, key, name, attributes=None):
        ''' Insert the record `{key: name, **attributes}` into the
        table if and only if no record with that key value exists.

        :param table: The name of the table to write to
        :param key: The partition key attribute name
        :param name: The value of the partition key
        :param attributes: Any extra attributes to store
        :raises ConditionFailed: If the record already exists
        :raises StoreError: On any other failure
        '''
        raise NotImplementedError("conditional_insert")

    def consistent_get(self, table, key, name):
        ''' Read the record with the supplied key value, observing
        the latest committed write.

        :param table: The name of the table to read from
        :param key: The partition key attribute name
        :param name: The value of the partition key
        :returns: The record as a dict, or None if it does not exist
        :raises StoreError: On any failure
        '''
        raise NotImplementedError("consistent_get")

    def delete(self, table, key, name):
        ''' Remove the record with the supplied key value whether
        or not it exists.

        :param table: The name of the table to delete from
        :param key: The partition key attribute name
        :param name: The value of the partition key
        :raises StoreError: On any failure
        '''
        raise NotImplementedError("delete")


class DynamoDBLockStore(LockStore):
    ''' A lock store backed by a DynamoDB table. The client is
    an explicit handle so that each process (or test) decides which
    session, region and endpoint it talks to::

        import boto3
        from actionlock import DynamoDBLockStore

        store = DynamoDBLockStore(client=boto3.client('dynamodb', region_name='eu-west-2'))
    '''

    condition_failed_code = 'ConditionalCheckFailedException'

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the DynamoDBLockStore class

        :param client: The boto3 dynamodb client, default boto3.client('dynamodb')
        '''
        self._client       = kwargs.get('client', None)
        self._serializer   = TypeSerializer()
        self._deserializer = TypeDeserializer()

    @property
    def client(self):
        ''' The dynamodb client, created on first use so that a
        missing region or credentials surface as a StoreError of
        the first operation.
        '''
        if self._client is None:
            self._client = boto3.client('dynamodb')
        return self._client

    def conditional_insert(self, table, key, name, attributes=None):
        item = dict(attributes or {})
        item[key] = name

        try:
            self.client.put_item(
                TableName                = table,
                Item                     = self._encode(item),
                ConditionExpression      = 'attribute_not_exists(#k)',
                ExpressionAttributeNames = { '#k': key })
        except ClientError as ex:
            if ex.response.get('Error', {}).get('Code') == self.condition_failed_code:
                raise ConditionFailed(name) from ex
            raise StoreError('put', name, ex) from ex
        except BotoCoreError as ex:
            raise StoreError('put', name, ex) from ex

    def consistent_get(self, table, key, name):
        try:
            output = self.client.get_item(
                TableName      = table,
                Key            = self._encode({ key: name }),
                ConsistentRead = True)
        except (ClientError, BotoCoreError) as ex:
            raise StoreError('get', name, ex) from ex

        record = output.get('Item')
        if not record:
            return None
        return self._decode(record)

    def delete(self, table, key, name):
        try:
            self.client.delete_item(
                TableName = table,
                Key       = self._encode({ key: name }))
        except (ClientError, BotoCoreError) as ex:
            raise StoreError('delete', name, ex) from ex

    # ------------------------------------------------------------
    # encoding methods
    # ------------------------------------------------------------

    def _encode(self, item):
        return { k : self._serializer.serialize(v) for k, v in item.items() }

    def _decode(self, record):
        return { k : self._deserializer.deserialize(v) for k, v in record.items() }


class MemoryLockStore(LockStore):
    ''' An in-process lock store that keeps every table as a dict.
    The conditional insert is made atomic with a mutex, so it is safe
    to share one instance between threads, which makes it the store
    of choice for tests and local runs.
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the MemoryLockStore class

        :param tables: The initial tables as {table: {name: record}}, default {}
        '''
        self.tables = kwargs.get('tables', {})
        self._mutex = Lock()

    def conditional_insert(self, table, key, name, attributes=None):
        item = dict(attributes or {})
        item[key] = name

        with self._mutex:
            records = self.tables.setdefault(table, {})
            if name in records:
                raise ConditionFailed(name)
            records[name] = item
        _logger.debug("inserted %s into memory table %s", name, table)

    def consistent_get(self, table, key, name):
        with self._mutex:
            record = self.tables.get(table, {}).get(name)
            return deepcopy(record)

    def delete(self, table, key, name):
        with self._mutex:
            self.tables.get(table, {}).pop(name, None)
