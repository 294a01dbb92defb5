import os
import xml.etree.ElementTree as ElementTree

from typing import NamedTuple

from . import SETTINGS


class ConfigurationError(Exception):
    """
    Raised when the Concerto server configuration can't be resolved.
    """


class ServerIdentity(NamedTuple):
    """
    Endpoint and client credentials used to talk to the Concerto API.
    """

    api_endpoint: str
    cert: str
    key: str


def default_config_file():
    """
    root uses the system wide configuration, any other user the one in its
    home directory
    :return: pathlib.Path
    """
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        return SETTINGS.DEFAULT_ROOT_CONFIG_FILE
    return SETTINGS.DEFAULT_USER_CONFIG_FILE


def read_config_file(config_file):
    """
    Reads the client configuration file, which looks like:

        <concerto version="1.0" server="https://clients.concerto.io:886/">
          <ssl cert="/etc/concerto/ssl/cert.crt"
               key="/etc/concerto/ssl/private/cert.key" />
        </concerto>

    :param config_file: str/Path: location of the xml file
    :return: dict: with api_endpoint, cert and key (values may be None)
    """
    try:
        root = ElementTree.parse(str(config_file)).getroot()
    except FileNotFoundError:
        raise ConfigurationError(
            f"Concerto configuration file {config_file} not found"
        )
    except (OSError, ElementTree.ParseError) as e:
        raise ConfigurationError(
            f"Can't read Concerto configuration file {config_file}: {e}"
        )

    if root.tag != "concerto":
        raise ConfigurationError(
            f"{config_file} is not a Concerto configuration file"
        )

    ssl = root.find("ssl")
    return {
        "api_endpoint": root.get("server"),
        "cert": ssl.get("cert") if ssl is not None else None,
        "key": ssl.get("key") if ssl is not None else None,
    }


def load_server_identity(config_file=None, api_endpoint=None, cert=None, key=None):
    """
    Resolves the server identity once, before any request is made. Explicit
    values take precedence over the ones in the configuration file, and the
    file is only read when something is missing.
    :return: ServerIdentity
    """
    values = {"api_endpoint": api_endpoint, "cert": cert, "key": key}

    if not all(values.values()):
        file_values = read_config_file(config_file or default_config_file())
        for name, value in values.items():
            if not value:
                values[name] = file_values[name]

    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            "Missing Concerto configuration: " + ", ".join(missing)
        )

    return ServerIdentity(**values)
