import argparse
import os

import blueprint
import cloud_accounts
import common

from reporter.local import get_logger
from settings import SETTINGS
from settings.server_config import ConfigurationError, load_server_identity
from webservice import Webservice
from webservice.exceptions import WebserviceError


class ConcertoControlException(Exception):
    pass


def cmd_download(webservice, args):
    """
    Saves the file served at args.path in args.directory and prints where
    """
    print(webservice.get_file(args.path, args.directory))
    return True


class ArgumentsParser:
    """
    That class used for subparsers setup, and storing all parsed arguments.
    """

    def __init__(self, args=None):
        self.root_parser = common.root_parser()
        self.root_parser.description = (
            "concerto is the command line client of the Concerto cloud "
            "management API"
        )

        self.management_parser = self.root_parser.add_subparsers(
            help="resource to manage", dest="command", required=True
        )
        blueprint.setup_parser(self.management_parser)
        cloud_accounts.setup_parser(self.management_parser)
        self._setup_download_parser()

        self.args = self.root_parser.parse_args(args)

    def _setup_download_parser(self):
        """
        Setup specific to download command arguments
        """
        download_parser = self.management_parser.add_parser(
            "download", help="download a file served by the API"
        )
        download_parser.formatter_class = argparse.RawTextHelpFormatter
        download_parser.add_argument(
            "path", help="path of the file, relative to the API endpoint"
        )
        download_parser.add_argument(
            "--directory",
            help="where to save the file, defaults to the current directory",
            default=os.curdir,
        )
        download_parser.set_defaults(perform=cmd_download)


class ConcertoControl:
    """
    Entry point. Calls specific command passed to cli-app.
    """

    def __init__(self, args, webservice=None):
        self.args = args
        self._webservice = webservice
        self._setup_logger()

    def _setup_logger(self):
        self._log = get_logger(
            SETTINGS.LOGGER_NAME,
            log_file=self.args.log_file,
            debug=self.args.debug,
            json_formatter=self.args.json_logging,
        )

    @property
    def webservice(self) -> Webservice:
        """
        Resolves the server identity and builds the client on first use,
        the same client serves every request of the run.
        """
        if self._webservice is None:
            identity = load_server_identity(
                config_file=self.args.concerto_config,
                api_endpoint=self.args.concerto_endpoint,
                cert=self.args.client_cert,
                key=self.args.client_key,
            )
            self._webservice = Webservice(identity)
        return self._webservice

    def perform_command(self):
        """
        Checks that passed command implemented in entry point class,
        runs it and logs the error that ended it, if any.
        :return: bool: whether the command succeeded
        """
        command = getattr(self.args, "perform", None)
        if command is None:
            raise ConcertoControlException(
                "Command {} does not implemented".format(self.args.command)
            )

        success = False
        try:
            success = command(self.webservice, self.args)
        except (WebserviceError, ConfigurationError, ValueError) as e:
            self._log.error(str(e))
        finally:
            self._log.debug(
                "finished %s run, success: %s", self.args.command, success
            )
        return success
