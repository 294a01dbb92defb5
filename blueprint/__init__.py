"""
A template bundles the operating system to be run by a cloud server and the
services and scripts to be applied to it, thus defining a blueprint for cloud
server configuration management.
"""
import argparse
import json
import logging

from common import decode_response, json_argument, print_table
from settings import SETTINGS

log = logging.getLogger(f"{SETTINGS.LOGGER_NAME}.templates")

TEMPLATES_ENDPOINT = "/v1/blueprint/templates"
SCRIPT_TYPES = ("operational", "boot", "migration", "shutdown")

TEMPLATE_HEADERS = ["ID", "NAME", "GENERIC IMAGE ID"]
TEMPLATE_DETAIL_HEADERS = TEMPLATE_HEADERS + [
    "SERVICE LIST",
    "CONFIGURATION ATTRIBUTES",
]
TEMPLATE_SCRIPT_HEADERS = [
    "ID",
    "TYPE",
    "EXECUTION ORDER",
    "TEMPLATE ID",
    "SCRIPT ID",
    "PARAMETER VALUES",
]
TEMPLATE_SERVER_HEADERS = [
    "ID",
    "NAME",
    "FQDN",
    "STATE",
    "PUBLIC IP",
    "WORKSPACE ID",
    "TEMPLATE ID",
    "SERVER PLAN ID",
    "SSH PROFILE ID",
]


def _template_row(template, detail=False):
    row = [template.get("id"), template.get("name"), template.get("generic_image_id")]
    if detail:
        row += [template.get("service_list"), template.get("configuration_attributes")]
    return row


def _template_script_row(script):
    return [
        script.get(key)
        for key in (
            "id",
            "type",
            "execution_order",
            "template_id",
            "script_id",
            "parameter_values",
        )
    ]


def _template_server_row(server):
    return [
        server.get(key)
        for key in (
            "id",
            "name",
            "fqdn",
            "state",
            "public_ip",
            "workspace_id",
            "template_id",
            "server_plan_id",
            "ssh_profile_id",
        )
    ]


def _template_body(args):
    """
    builds the request body out of the optional template flags that were set
    :return: bytes: JSON encoded template
    """
    template = {}
    if getattr(args, "name", None) is not None:
        template["name"] = args.name
    if getattr(args, "generic_image_id", None) is not None:
        template["generic_image_id"] = args.generic_image_id
    if args.service_list is not None:
        template["service_list"] = args.service_list
    if args.configuration_attributes is not None:
        template["configuration_attributes"] = args.configuration_attributes
    return json.dumps(template).encode()


def _scripts_endpoint(template_id):
    return f"{TEMPLATES_ENDPOINT}/{template_id}/scripts"


def cmd_list(webservice, args):
    templates = decode_response(webservice.get(TEMPLATES_ENDPOINT)) or []
    print_table(TEMPLATE_HEADERS, [_template_row(t) for t in templates])
    return True


def cmd_show(webservice, args):
    template = decode_response(webservice.get(f"{TEMPLATES_ENDPOINT}/{args.id}"))
    rows = [_template_row(template, detail=True)] if template else []
    print_table(TEMPLATE_DETAIL_HEADERS, rows)
    return True


def cmd_create(webservice, args):
    template = decode_response(
        webservice.post(TEMPLATES_ENDPOINT, _template_body(args))
    )
    rows = [_template_row(template, detail=True)] if template else []
    print_table(TEMPLATE_DETAIL_HEADERS, rows)
    return True


def cmd_update(webservice, args):
    template = decode_response(
        webservice.put(f"{TEMPLATES_ENDPOINT}/{args.id}", _template_body(args))
    )
    rows = [_template_row(template, detail=True)] if template else []
    print_table(TEMPLATE_DETAIL_HEADERS, rows)
    return True


def cmd_delete(webservice, args):
    decode_response(webservice.delete(f"{TEMPLATES_ENDPOINT}/{args.id}"))
    log.info("Deleted template %s", args.id)
    return True


def cmd_list_template_scripts(webservice, args):
    scripts = decode_response(
        webservice.get(f"{_scripts_endpoint(args.template_id)}?type={args.type}")
    ) or []
    print_table(TEMPLATE_SCRIPT_HEADERS, [_template_script_row(s) for s in scripts])
    return True


def cmd_show_template_script(webservice, args):
    script = decode_response(
        webservice.get(f"{_scripts_endpoint(args.template_id)}/{args.id}")
    )
    rows = [_template_script_row(script)] if script else []
    print_table(TEMPLATE_SCRIPT_HEADERS, rows)
    return True


def cmd_create_template_script(webservice, args):
    body = {
        "script_id": args.script_id,
        "type": args.type,
        "parameter_values": args.parameter_values,
    }
    script = decode_response(
        webservice.post(
            _scripts_endpoint(args.template_id), json.dumps(body).encode()
        )
    )
    rows = [_template_script_row(script)] if script else []
    print_table(TEMPLATE_SCRIPT_HEADERS, rows)
    return True


def cmd_update_template_script(webservice, args):
    body = {}
    if args.parameter_values is not None:
        body["parameter_values"] = args.parameter_values
    script = decode_response(
        webservice.put(
            f"{_scripts_endpoint(args.template_id)}/{args.id}",
            json.dumps(body).encode(),
        )
    )
    rows = [_template_script_row(script)] if script else []
    print_table(TEMPLATE_SCRIPT_HEADERS, rows)
    return True


def cmd_reorder_template_scripts(webservice, args):
    body = {"type": args.type, "script_ids": args.script_ids}
    scripts = decode_response(
        webservice.put(
            f"{_scripts_endpoint(args.template_id)}/reorder",
            json.dumps(body).encode(),
        )
    ) or []
    print_table(TEMPLATE_SCRIPT_HEADERS, [_template_script_row(s) for s in scripts])
    return True


def cmd_delete_template_script(webservice, args):
    decode_response(
        webservice.delete(f"{_scripts_endpoint(args.template_id)}/{args.id}")
    )
    log.info("Deleted script %s from template %s", args.id, args.template_id)
    return True


def cmd_list_template_servers(webservice, args):
    servers = decode_response(
        webservice.get(f"{TEMPLATES_ENDPOINT}/{args.template_id}/servers")
    ) or []
    print_table(TEMPLATE_SERVER_HEADERS, [_template_server_row(s) for s in servers])
    return True


def _add_template_flags(parser, required=False):
    parser.add_argument("--name", help="Name of the template", required=required)
    parser.add_argument(
        "--generic_image_id",
        help="Identifier of the OS image that the template builds on",
        required=required,
    )
    parser.add_argument(
        "--service_list",
        help="A list of service recipes that is run on the servers at "
        "start-up (JSON array)",
        type=json_argument,
    )
    parser.add_argument(
        "--configuration_attributes",
        help="The attributes used to configure the services in the "
        "service_list (JSON object)",
        type=json_argument,
    )


def setup_parser(management_parser):
    """
    Adds the `templates` command and its actions
    :param management_parser: subparsers action of the root parser
    """
    templates_parser = management_parser.add_parser(
        "templates", help="manage blueprint templates"
    )
    templates_parser.formatter_class = argparse.RawTextHelpFormatter
    actions = templates_parser.add_subparsers(dest="action", required=True)

    parser = actions.add_parser("list", help="Lists all available templates.")
    parser.set_defaults(perform=cmd_list)

    parser = actions.add_parser(
        "show", help="Shows information about a specific template."
    )
    parser.add_argument("--id", help="Template Id", required=True)
    parser.set_defaults(perform=cmd_show)

    parser = actions.add_parser("create", help="Creates a new template.")
    _add_template_flags(parser, required=True)
    parser.set_defaults(perform=cmd_create)

    parser = actions.add_parser("update", help="Updates an existing template.")
    parser.add_argument("--id", help="Template Id", required=True)
    _add_template_flags(parser)
    parser.set_defaults(perform=cmd_update)

    parser = actions.add_parser("delete", help="Deletes a template.")
    parser.add_argument("--id", help="Template Id", required=True)
    parser.set_defaults(perform=cmd_delete)

    parser = actions.add_parser(
        "list_template_scripts",
        help="Shows the script characterisations of a template that are "
        "run during boot, migration, shutdown or in operational state.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--type", choices=SCRIPT_TYPES, required=True)
    parser.set_defaults(perform=cmd_list_template_scripts)

    parser = actions.add_parser(
        "show_template_script",
        help="Shows information about a script characterisation.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--id", help="Script characterisation Id", required=True)
    parser.set_defaults(perform=cmd_show_template_script)

    parser = actions.add_parser(
        "create_template_script",
        help="Creates a new script characterisation for a template and "
        "appends it to the ones of the same type.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--type", choices=SCRIPT_TYPES, required=True)
    parser.add_argument(
        "--script_id",
        help="Identifier for the script that is parameterised by the script "
        "characterisation",
        required=True,
    )
    parser.add_argument(
        "--parameter_values",
        help="A map that assigns a value to each script parameter (JSON object)",
        type=json_argument,
        required=True,
    )
    parser.set_defaults(perform=cmd_create_template_script)

    parser = actions.add_parser(
        "update_template_script",
        help="Updates an existing script characterisation for a template.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--id", help="Script characterisation Id", required=True)
    parser.add_argument(
        "--parameter_values",
        help="A map that assigns a value to each script parameter (JSON object)",
        type=json_argument,
    )
    parser.set_defaults(perform=cmd_update_template_script)

    parser = actions.add_parser(
        "reorder_template_scripts",
        help="Reorders the scripts of the template and type specified, "
        "changing their execution order.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--type", choices=SCRIPT_TYPES, required=True)
    parser.add_argument(
        "--script_ids",
        help="All the ids of scripts of the given template and type, in the "
        "desired execution order",
        nargs="+",
        required=True,
    )
    parser.set_defaults(perform=cmd_reorder_template_scripts)

    parser = actions.add_parser(
        "delete_template_script",
        help="Removes a parametrized script from a template.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.add_argument("--id", help="Script characterisation Id", required=True)
    parser.set_defaults(perform=cmd_delete_template_script)

    parser = actions.add_parser(
        "list_template_servers",
        help="Lists the servers built from a template.",
    )
    parser.add_argument("--template_id", help="Template Id", required=True)
    parser.set_defaults(perform=cmd_list_template_servers)

    return templates_parser
