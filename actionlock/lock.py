'''
The ActionLock represents a single lock record as it was last observed
in (or written to) the lock table. It is an immutable tuple so that the
instances handed back from the client cannot be used to change the
state of the client or of the table.

The existence of a record with a given name *is* the lock: if the
record is present the lock is held, otherwise it is free.
'''
from collections import namedtuple

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

ActionLock = namedtuple('ActionLock', ['key', 'name', 'owner', 'timestamp'])
