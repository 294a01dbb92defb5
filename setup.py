import os
from setuptools import setup, find_packages

# See https://www.python.org/dev/peps/pep-0440 for version standards
MODULE_VERSION_MAJOR = 0
MODULE_VERSION_MINOR = 2


def __path(filename):
    return os.path.join(os.path.dirname(__file__), filename)


dir_path = os.path.dirname(os.path.realpath(__file__))
with open("{}/requirements.txt".format(dir_path)) as requirements_file:
    install_requirements = [
        line.strip() for line in requirements_file if line.strip()
    ]


build = "dev1"
if os.path.exists(__path("build.info")):
    build = open(__path("build.info")).read().strip()

version = "{}.{}.{}".format(MODULE_VERSION_MAJOR, MODULE_VERSION_MINOR, build)

setup(
    name="concerto_cli",
    version=version,
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["concerto_cli"],
    license="GPLv3",
    description="Command line client for the Concerto cloud management API",
    long_description=open(__path("README.md")).read(),
    long_description_content_type="text/markdown",
    scripts=["concerto_cli.py"],
    python_requires=">=3.7",
    install_requires=install_requirements,
    extras_require={"test": ["pytest", "pytest-mock"]},
)
