import logging
import re

from settings import SETTINGS

from .exceptions import HTTPStatusError

log = logging.getLogger(f"{SETTINGS.LOGGER_NAME}.webservice")

_FIELD_SEPARATORS = re.compile(r'[,:{}"\]\[]+')


def scrape_error_message(message, expression):
    """
    Returns the first group captured by expression, or the generic error
    message if it doesn't match
    :param message: str: response body
    :param expression: str: regular expression with one capture group
    :return: str
    """
    scrapped = re.search(expression, message)
    if scrapped is None or scrapped.lastindex is None:
        return SETTINGS.GENERIC_ERROR_MESSAGE
    return scrapped.group(1)


class ErrorMatcher:
    """
    A single content-shape heuristic. A matcher claims a body when its marker
    is in it, then extracts whatever its pattern captures.
    """

    marker = None
    pattern = None

    def matches(self, message: str) -> bool:
        return self.marker in message

    def extract(self, message: str) -> str:
        return scrape_error_message(message, self.pattern)


class HtmlTitleMatcher(ErrorMatcher):
    """Error pages: the page title is the message"""

    marker = "<html>"
    pattern = r"<title>(.*?)</title>"


class ErrorsEnvelopeMatcher(ErrorMatcher):
    """
    Validation errors, like {"errors":{"name":"is required","age":"..."}}.
    Only the first field is reported.
    """

    marker = '{"errors":{'
    pattern = r'\{"errors":(.*?)\}'

    def extract(self, message: str) -> str:
        first_field = super().extract(message).split(",")[0]
        fields = [f for f in _FIELD_SEPARATORS.split(first_field) if f]
        return " ".join(fields)


class ErrorEnvelopeMatcher(ErrorMatcher):
    """Single error, like {"error":"invalid token"}"""

    marker = '{"error":'
    pattern = r'\{"error":"(.*?)"'


MATCHERS = (HtmlTitleMatcher(), ErrorsEnvelopeMatcher(), ErrorEnvelopeMatcher())


def classify(status_code: int, body: bytes, matchers=MATCHERS) -> str:
    """
    Turns a failure body into a single human readable message. Matchers are
    tried in order and the first one claiming the body wins; when none does,
    the body itself is the message.
    :param status_code: int: HTTP status, only used for logging
    :param body: bytes: raw response body
    :param matchers: ordered sequence of :class:`ErrorMatcher`
    :return: str
    """
    message = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    log.debug("Concerto API response (%s): %s", status_code, message)

    for matcher in matchers:
        if matcher.matches(message):
            return matcher.extract(message)
    return message


def check_return_code(status_code: int, body: bytes):
    """
    :raises HTTPStatusError: when status_code is 300 or above
    """
    if status_code >= 300:
        raise HTTPStatusError(status_code, classify(status_code, body))
