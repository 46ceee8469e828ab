import os
import json
from datetime import timedelta

from .policy import ActionLockPolicy
from .schema import ActionLockSchema

#--------------------------------------------------------------------------------
# constants
#--------------------------------------------------------------------------------

ENVIRONMENT_PREFIX = 'INPUT_'

DEFAULTS = {
    'timeout':    30,                     # minutes to wait to acquire a lock
    'table':      'github-action-locks',  # table to write the lock in
    'key':        'LockID',               # attribute where we write locks
    'name':       'foobar',               # name of the lock to create
    'identifier': '',                     # owner recorded with the lock
    'retry':      5,                      # seconds between attempts
    'jitter':     0,                      # maximum random seconds added to a retry
}

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class ActionLockSettings(object):
    ''' The values a lock or unlock run is configured with. They
    are read from `INPUT_<NAME>` environment variables, which is how
    a GitHub action receives its inputs, and can be overridden by
    anything passed in explicitly::

        settings = ActionLockSettings.from_environ(name="deploy")
        client   = ActionLockClient(policy=settings.to_policy(), schema=settings.to_schema())
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the ActionLockSettings class

        :param timeout: How long to wait to acquire a lock, in minutes
        :param table: The table to write the lock in
        :param key: The name of the attribute where we write locks
        :param name: The name of the lock
        :param identifier: The owner identifier recorded with the lock
        :param retry: The seconds to wait between attempts
        :param jitter: The maximum random seconds added to each wait
        '''
        for field, default in DEFAULTS.items():
            setattr(self, field, kwargs.get(field, default))

    @classmethod
    def from_environ(cls, environ=None, fields=None, **overrides):
        ''' Build the settings from the environment, letting any
        non None override win. Settings outside of `fields` are
        left at their defaults without being read.

        :param environ: The environment to read, default os.environ
        :param fields: The settings to resolve, default all of them
        :param overrides: Explicit values for any of the settings
        :returns: The resolved settings
        :raises ValueError: If a numeric setting is invalid
        '''
        environ = os.environ if environ is None else environ
        fields  = DEFAULTS.keys() if fields is None else fields
        values  = {}

        for field, default in DEFAULTS.items():
            if field not in fields:
                values[field] = default
                continue

            value = overrides.get(field)
            if value is None:
                value = environ.get(ENVIRONMENT_PREFIX + field.upper())
            if value is None or value == '':
                value = default
            values[field] = coerce(field, value)
        return cls(**values)

    def to_policy(self):
        return ActionLockPolicy(
            acquire_timeout = timedelta(minutes=self.timeout),
            retry_period    = timedelta(seconds=self.retry),
            retry_jitter    = timedelta(seconds=self.jitter))

    def to_schema(self):
        return ActionLockSchema(table_name=self.table, key=self.key)

    def __str__(self):
        return json.dumps(self.__dict__)

    __repr__ = __str__

#--------------------------------------------------------------------------------
# helpers
#--------------------------------------------------------------------------------

def coerce(field, value):
    ''' Convert a raw setting to the type of its default.

    :param field: The name of the setting
    :param value: The raw value
    :returns: The converted value
    '''
    default = DEFAULTS[field]
    if not isinstance(default, int):
        return value

    if not isinstance(value, (int, float)):
        try:
            value = int(value) if field == 'timeout' else float(value)
        except ValueError:
            raise ValueError("invalid value for %s: %r" % (field, value))

    if value < 0 or (field == 'retry' and value == 0):
        raise ValueError("%s must be %s: %r" % (field,
            'positive' if field == 'retry' else 'zero or more', value))
    return value
