import logging
import os
import re
import ssl

from typing import Mapping, NamedTuple

import requests
import urllib3

from requests.adapters import HTTPAdapter
from urllib3.util.ssl_ import create_urllib3_context

from settings import SETTINGS

from .classifier import check_return_code
from .exceptions import (
    CredentialLoadError,
    FileWriteError,
    MissingFilenameError,
    TransportError,
)

log = logging.getLogger(f"{SETTINGS.LOGGER_NAME}.webservice")

# Concerto deployments usually run with self-signed server certificates
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


class RawResponse(NamedTuple):
    status_code: int
    body: bytes
    headers: Mapping[str, str]


class ClientCertificateAdapter(HTTPAdapter):
    """
    HTTPAdapter that hands a prepared SSL context, carrying the client
    certificate, to every connection pool it creates.
    """

    def __init__(self, ssl_context, *args, **kwargs):
        self.ssl_context = ssl_context
        super().__init__(*args, **kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self.ssl_context
        return super().init_poolmanager(*args, **kwargs)


def create_ssl_context(cert, key):
    """
    Builds a TLS context presenting the client certificate. The server
    certificate is NOT verified.
    :param cert: str: path to the client certificate
    :param key: str: path to the client private key
    :return: ssl.SSLContext
    """
    context = create_urllib3_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    try:
        context.load_cert_chain(certfile=cert, keyfile=key)
    except (OSError, ssl.SSLError) as e:
        raise CredentialLoadError(
            f"Can't load client certificate {cert} with key {key}: {e}"
        )
    return context


def build_client(identity):
    """
    Creates the transport client shared by every request of the process
    :param identity: :class:`settings.server_config.ServerIdentity`
    :return: requests.Session
    """
    ssl_context = create_ssl_context(identity.cert, identity.key)

    session = requests.Session()
    session.verify = False
    session.mount("https://", ClientCertificateAdapter(ssl_context))
    return session


class Webservice:
    """
    Executes requests against the Concerto API. Status codes are not
    interpreted here, see :func:`webservice.classifier.check_return_code`.
    """

    def __init__(self, identity, client=None):
        self.identity = identity
        self._client = client if client is not None else build_client(identity)

    @property
    def client(self) -> requests.Session:
        return self._client

    def _url(self, endpoint):
        return self.identity.api_endpoint + endpoint

    def _request(self, method, endpoint, data=None):
        url = self._url(endpoint)
        log.debug("Connecting: %s", url)

        headers = None
        if data is not None:
            headers = {"Content-Type": "application/json"}
            log.debug("Sending: %s", data)

        try:
            with self.client.request(
                method, url, data=data, headers=headers
            ) as response:
                log.debug("Status code: %s", response.status_code)
                return RawResponse(
                    response.status_code, response.content, response.headers
                )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}")

    def get(self, endpoint) -> RawResponse:
        return self._request("GET", endpoint)

    def post(self, endpoint, body) -> RawResponse:
        return self._request("POST", endpoint, data=body)

    def put(self, endpoint, body) -> RawResponse:
        return self._request("PUT", endpoint, data=body)

    def delete(self, endpoint) -> RawResponse:
        return self._request("DELETE", endpoint)

    def get_file(self, endpoint, directory_path) -> str:
        """
        Downloads a file and saves it under directory_path, using the name
        sent by the server in the Content-Disposition header
        :param endpoint: str: path of the resource relative to the API endpoint
        :param directory_path: str: where to save the file
        :return: str: path of the written file
        """
        url = self._url(endpoint)
        log.debug("Connecting: %s", url)

        try:
            with self.client.get(url, stream=True) as response:
                log.debug("Status code: %s", response.status_code)
                if response.status_code >= 300:
                    check_return_code(response.status_code, response.content)

                file_name = parse_file_name(
                    response.headers.get("Content-Disposition")
                )
                real_file_name = destination_path(directory_path, file_name)
                written = _copy_to_file(response, real_file_name)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}")

        log.debug("%s bytes downloaded", written)
        return real_file_name


def parse_file_name(content_disposition):
    """
    :param content_disposition: str: Content-Disposition header value
    :return: str: the quoted filename
    :raises MissingFilenameError: when the header is absent or has no filename
    """
    if not content_disposition:
        raise MissingFilenameError("Response has no Content-Disposition header")

    match = re.search(SETTINGS.CONTENT_DISPOSITION_REGEX, content_disposition)
    if match is None:
        raise MissingFilenameError(
            f"No filename in Content-Disposition header: {content_disposition}"
        )
    return match.group(1)


def destination_path(directory_path, file_name):
    """
    Places file_name under directory_path, a leading slash does not make it
    absolute
    :raises MissingFilenameError: when the name points outside directory_path
    """
    directory = os.path.abspath(directory_path)
    real_file_name = os.path.join(directory_path, file_name.lstrip("/"))
    if os.path.commonpath([directory, os.path.abspath(real_file_name)]) != directory:
        raise MissingFilenameError(
            f"Filename {file_name} points outside {directory_path}"
        )
    return real_file_name


def _copy_to_file(response, file_name):
    written = 0
    try:
        with open(file_name, "wb") as output:
            for chunk in response.iter_content(SETTINGS.DOWNLOAD_CHUNK_SIZE):
                output.write(chunk)
                written += len(chunk)
    except OSError as e:
        if isinstance(e, requests.exceptions.RequestException):
            raise
        raise FileWriteError(f"Can't write {file_name}: {e}")
    return written
