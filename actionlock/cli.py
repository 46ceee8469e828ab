'''
The command line entry point: `actionlock lock` creates the lock and
`actionlock unlock` releases it. Every option can also be given as an
`INPUT_<OPTION>` environment variable.

Exit codes:

* 0 - the lock was acquired, or released (even if it did not exist)
* 1 - the store failed or the lock could not be acquired in time
* 2 - the command line or environment is invalid
'''
import sys
import argparse

from .client   import ActionLockClient
from .errors   import LockError
from .settings import ActionLockSettings
from .store    import DynamoDBLockStore

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# constants
#--------------------------------------------------------------------------------

EXIT_OK     = 0
EXIT_FAILED = 1
EXIT_USAGE  = 2

#--------------------------------------------------------------------------------
# parser
#--------------------------------------------------------------------------------

def _add_lock_options(parser, table_help):
    parser.add_argument('--table', help=table_help)
    parser.add_argument('--key', help="Name of the column where we write locks")
    parser.add_argument('--name', help="Name of the lock")


def build_parser():
    parser = argparse.ArgumentParser(prog='actionlock',
        description="Create a distributed lock for a GitHub Action")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    lock = commands.add_parser('lock', help="Create a lock")
    lock.add_argument('--timeout', type=int, help="How long to wait to acquire a lock, in minutes")
    _add_lock_options(lock, "DynamoDB table to write the lock in")
    lock.add_argument('--identifier', help="Owner identifier recorded with the lock")
    lock.add_argument('--retry', type=float, help="Seconds to wait between attempts")
    lock.add_argument('--jitter', type=float, help="Maximum random seconds added to each wait")

    unlock = commands.add_parser('unlock', help="Release a lock")
    _add_lock_options(unlock, "DynamoDB table to delete the lock from")
    return parser

#--------------------------------------------------------------------------------
# commands
#--------------------------------------------------------------------------------

def run_lock(client, settings):
    _logger.info("creating lock with the following parameters:")
    _logger.info("LockTimeout: %s", settings.timeout)
    _logger.info("LockTable: %s", settings.table)
    _logger.info("LockKeyName: %s", settings.key)
    _logger.info("LockName: %s", settings.name)

    client.acquire_lock(settings.name, owner=settings.identifier)
    _logger.info("lock acquired")


def run_unlock(client, settings):
    _logger.info("acquiring lock %s to release it", settings.name)
    client.release_lock(settings.name)


COMMANDS = {
    'lock':   run_lock,
    'unlock': run_unlock,
}

# the settings each command reads, anything else keeps its default
COMMAND_FIELDS = {
    'lock':   ('timeout', 'table', 'key', 'name', 'identifier', 'retry', 'jitter'),
    'unlock': ('table', 'key', 'name'),
}

def main(argv=None, environ=None, store=None):
    ''' Run the command line and return the process exit code.

    :param argv: The arguments to parse, default sys.argv[1:]
    :param environ: The environment to read settings from, default os.environ
    :param store: The lock store to use, default DynamoDB
    :returns: The exit code of the run
    '''
    parser = build_parser()
    args   = parser.parse_args(argv)

    logging.basicConfig(
        level  = logging.DEBUG if args.verbose else logging.INFO,
        format = "%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides = { k : v for k, v in vars(args).items() if k not in ('command', 'verbose') }
    try:
        settings = ActionLockSettings.from_environ(environ, COMMAND_FIELDS[args.command], **overrides)
        policy   = settings.to_policy()
    except ValueError as ex:
        parser.error(str(ex))

    client = ActionLockClient(
        policy = policy,
        schema = settings.to_schema(),
        owner  = settings.identifier,
        store  = store or DynamoDBLockStore())

    try:
        COMMANDS[args.command](client, settings)
    except LockError as ex:
        _logger.critical("%s failed: %s", args.command, ex)
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
