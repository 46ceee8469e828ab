'''
The exceptions raised by the lock client and the stores it talks to.
Every store failure is classified into exactly one of these kinds:

* ConditionFailed - the lock record already exists (absorbed while acquiring)
* StoreError      - any other backend failure (always fatal, never retried)
* LockTimeout     - the acquire deadline passed while the lock was still held
'''

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class LockError(Exception):
    ''' Base class of every error raised by actionlock '''

    def __init__(self, message, name=None):
        super(LockError, self).__init__(message)
        self.name = name


class ConditionFailed(LockError):
    ''' The conditional insert was rejected because a record with the
    same key value already exists, i.e. someone else holds the lock.
    '''

    def __init__(self, name):
        super(ConditionFailed, self).__init__("lock %s is already held" % name, name)


class StoreError(LockError):
    ''' Any failure of the backing store other than a failed condition:
    connectivity, throttling, authorization or a malformed request.

    :param operation: The store operation that failed (put, get, delete)
    :param name: The name of the lock being operated on
    :param cause: The underlying exception raised by the backend
    '''

    def __init__(self, operation, name, cause=None):
        message = "failed to %s lock %s: %s" % (operation, name, cause)
        super(StoreError, self).__init__(message, name)
        self.operation = operation
        self.cause     = cause


class LockTimeout(LockError):
    ''' The configured deadline elapsed before the lock could be acquired.

    :param name: The name of the lock that could not be acquired
    :param elapsed: The number of seconds spent waiting
    '''

    def __init__(self, name, elapsed):
        message = "timed out after %.1f secs waiting to acquire lock %s" % (elapsed, name)
        super(LockTimeout, self).__init__(message, name)
        self.elapsed = elapsed
