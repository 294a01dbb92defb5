import argparse
import json
import logging

from common import decode_response, json_argument, print_table
from settings import SETTINGS

log = logging.getLogger(f"{SETTINGS.LOGGER_NAME}.cloud_accounts")

CLOUD_ACCOUNTS_ENDPOINT = "/v1/settings/cloud_accounts"
CLOUD_ACCOUNT_HEADERS = ["ID", "CLOUD PROVIDER ID"]

# credentials a cloud provider may ask for, anything else is dropped
REQUIRED_CREDENTIALS = (
    "access_key_id",
    "secret_access_key",
    "username",
    "api_key",
    "password",
    "user",
    "client_id",
    "google_project",
    "google_client_email",
    "cert_google_key",
    "subscription_id",
    "cert_management_certificate",
)


def filter_credentials(credentials):
    """
    Keeps only the credential keys known by the Concerto API
    :param credentials: dict: parsed from the --credentials flag
    :return: dict
    """
    if not isinstance(credentials, dict):
        raise ValueError("credentials must be a JSON object")
    return {
        key: value
        for key, value in credentials.items()
        if key in REQUIRED_CREDENTIALS
    }


def _account_row(account):
    return [account.get("id"), account.get("cloud_provider_id")]


def cmd_list(webservice, args):
    accounts = decode_response(webservice.get(CLOUD_ACCOUNTS_ENDPOINT)) or []
    print_table(CLOUD_ACCOUNT_HEADERS, [_account_row(a) for a in accounts])
    return True


def cmd_create(webservice, args):
    body = {
        "cloud_provider_id": args.cloud_provider_id,
        "credentials": filter_credentials(args.credentials),
    }
    account = decode_response(
        webservice.post(CLOUD_ACCOUNTS_ENDPOINT, json.dumps(body).encode())
    )
    if account:
        print_table(CLOUD_ACCOUNT_HEADERS, [_account_row(account)])
    return True


def cmd_update(webservice, args):
    body = {}
    if args.credentials is not None:
        body["credentials"] = filter_credentials(args.credentials)
    account = decode_response(
        webservice.put(
            f"{CLOUD_ACCOUNTS_ENDPOINT}/{args.id}", json.dumps(body).encode()
        )
    )
    if account:
        print_table(CLOUD_ACCOUNT_HEADERS, [_account_row(account)])
    return True


def cmd_delete(webservice, args):
    decode_response(webservice.delete(f"{CLOUD_ACCOUNTS_ENDPOINT}/{args.id}"))
    log.info("Deleted cloud account %s", args.id)
    return True


def setup_parser(management_parser):
    """
    Adds the `cloud_accounts` command and its actions
    :param management_parser: subparsers action of the root parser
    """
    accounts_parser = management_parser.add_parser(
        "cloud_accounts", help="manage the cloud accounts of the account group"
    )
    accounts_parser.formatter_class = argparse.RawTextHelpFormatter
    actions = accounts_parser.add_subparsers(dest="action", required=True)

    parser = actions.add_parser(
        "list", help="Lists the cloud accounts of the account group."
    )
    parser.set_defaults(perform=cmd_list)

    parser = actions.add_parser("create", help="Creates a new cloud account.")
    parser.add_argument(
        "--cloud_provider_id",
        help="Identifier of the cloud provider",
        required=True,
    )
    parser.add_argument(
        "--credentials",
        help="A mapping assigning a value to each of the required credentials "
        "of the cloud provider (JSON object)",
        type=json_argument,
        required=True,
    )
    parser.set_defaults(perform=cmd_create)

    parser = actions.add_parser(
        "update", help="Updates an existing cloud account."
    )
    parser.add_argument("--id", help="Account Id", required=True)
    parser.add_argument(
        "--credentials",
        help="A mapping assigning a value to each of the required credentials "
        "of the cloud provider (JSON object)",
        type=json_argument,
    )
    parser.set_defaults(perform=cmd_update)

    parser = actions.add_parser("delete", help="Deletes a cloud account.")
    parser.add_argument("--id", help="Account Id", required=True)
    parser.set_defaults(perform=cmd_delete)

    return accounts_parser
