import argparse
import json

from settings import SETTINGS
from webservice.classifier import check_return_code


def root_parser():
    """
    parses arguments passed on command line when running program
    :return: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "--concerto-config",
        help="path to the Concerto client configuration file, if different "
        "from default",
    )
    parser.add_argument(
        "--concerto-endpoint",
        help="URL of the Concerto API, overrides the configuration file",
    )
    parser.add_argument(
        "--client-cert",
        help="path to the client certificate, overrides the configuration file",
    )
    parser.add_argument(
        "--client-key",
        help="path to the client private key, overrides the configuration file",
    )
    parser.add_argument(
        "--log-file",
        help="path to log file, if different from default",
        default=SETTINGS.DEFAULT_LOG_FILE,
    )
    parser.add_argument(
        "--debug",
        help="output debug information to help troubleshoot issues",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--json-logging",
        help="Enable logging in json logging format",
        default=False,
        action="store_true",
    )
    return parser


def json_argument(value):
    """
    argparse type for flags taking a JSON string
    """
    try:
        return json.loads(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid JSON value: {value}")


def format_value(value):
    """
    Lists and maps are printed as JSON, missing values as empty strings
    """
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def format_table(headers, rows):
    """
    Aligns columns the way text/tabwriter does: each cell padded to the
    widest cell of its column plus padding, never narrower than the minimum
    width.
    :param headers: list: of column titles
    :param rows: list: of lists of values, one per column
    :return: str
    """
    lines = [list(headers)] + [[format_value(v) for v in row] for row in rows]
    widths = [
        max(SETTINGS.TABLE_MIN_WIDTH, max(len(line[i]) for line in lines) + SETTINGS.TABLE_PADDING)
        for i in range(len(headers))
    ]

    output = []
    for line in lines:
        cells = [cell.ljust(width) for cell, width in zip(line[:-1], widths)]
        output.append("".join(cells + line[-1:]))
    return "\n".join(output)


def print_table(headers, rows):
    print(format_table(headers, rows))


def decode_response(response):
    """
    Checks the status of a :class:`webservice.RawResponse` and decodes its
    JSON body
    :raises webservice.exceptions.HTTPStatusError: for failure statuses
    :return: decoded body, or None when the body is empty
    """
    check_return_code(response.status_code, response.body)
    if not response.body:
        return None
    return json.loads(response.body)
