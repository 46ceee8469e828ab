import json

from .lock import ActionLock

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class ActionLockSchema(object):
    ''' A collection of the schema names for the underlying
    locks table. This can be overridden by simply supplying
    new names in the constructor::

        from actionlock import ActionLockSchema

        schema = ActionLockSchema(table_name="locks", key="LockID")
    '''

    def __init__(self, **kwargs):
        ''' Initializes a new instance of the ActionLockSchema class

        :param table_name: The name of the database locks table
        :param key: The partition key attribute holding the lock name
        :param owner: The attribute holding the lock owner
        '''
        self.table_name = kwargs.get('table_name', 'github-action-locks')
        self.key        = kwargs.get('key',        'LockID')
        self.owner      = kwargs.get('owner',      'Owner')

    # ------------------------------------------------------------
    # schema operations
    # ------------------------------------------------------------
    # These methods convert to and from the underlying table
    # schema
    # ------------------------------------------------------------

    def to_attributes(self, owner):
        ''' Given the owner of a new lock, build the attributes
        that are stored next to the key. An empty owner is not
        written at all.

        :param owner: The owner identifier of the lock
        :returns: The extra attributes to store with the key
        '''
        schema = {}
        if owner: schema[self.owner] = owner
        return schema

    def to_lock(self, item, timestamp):
        ''' Given a lock record read from the table, convert it to
        an ActionLock.

        :param item: The record to convert
        :param timestamp: The local time the record was observed
        :returns: The converted lock
        '''
        return ActionLock(
            key       = self.key,
            name      = item.get(self.key),
            owner     = item.get(self.owner, None),
            timestamp = timestamp)

    def __str__(self):
        return json.dumps(self.__dict__)

    __repr__ = __str__
