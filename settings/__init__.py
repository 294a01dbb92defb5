import logging
import os

from importlib import import_module

from . import default_settings

ENVIRONMENT_PREFIX = "CONCERTO_"

log = logging.getLogger(__name__)


class BaseSettings:
    """
    An object that holds settings values.
    Only uppercase names are treated as settings, everything else is stored
    as a regular instance attribute.
    """

    def __init__(self, module=None, attributes=None):
        """
        :param object/string module: a settings module or its import path.
        :param dict attributes: A dict object containing the settings values.
        """
        self.attributes = {}
        if module:
            self.add_module(module)
        if attributes:
            self.set_from_dict(attributes)

    def __getattr__(self, name):
        val = self.get(name)
        if val is not None:
            return val
        else:
            try:
                return self.__dict__[name]
            except KeyError:
                raise AttributeError(name)

    def __setattr__(self, name, value):
        if name.isupper():
            self.attributes[name] = value
        else:
            self.__dict__[name] = value

    def add_module(self, module):
        if isinstance(module, str):
            module = import_module(module)
        for key in dir(module):
            if key.isupper():
                self.set(key, getattr(module, key))

    def add_environment(self, environ=None):
        """
        Overrides known settings with `CONCERTO_<NAME>` environment variables.
        Values are kept as strings, except for integer settings. An integer
        setting given a non-integer value keeps its default.
        """
        environ = os.environ if environ is None else environ
        for key in list(self.attributes):
            env_value = environ.get(ENVIRONMENT_PREFIX + key)
            if env_value is None:
                continue
            if isinstance(self.attributes[key], int):
                try:
                    env_value = int(env_value)
                except ValueError:
                    log.warning(
                        "Ignoring %s%s=%r, an integer is expected",
                        ENVIRONMENT_PREFIX,
                        key,
                        env_value,
                    )
                    continue
            self.set(key, env_value)

    def get(self, key, default_value=None):
        if not key.isupper():
            return None
        return self.attributes.get(key, default_value)

    def set(self, key, value):
        if key.isupper():
            self.attributes[key] = value

    def set_from_dict(self, attributes):
        for name, value in attributes.items():
            self.set(name, value)


class Settings(BaseSettings):
    def __init__(self, module=None, attributes=None, environ=None):
        super(Settings, self).__init__(default_settings, attributes)

        if module:
            self.add_module(module)
        self.add_environment(environ)


SETTINGS = Settings()
