#!/usr/bin/env python3
import sys

from concerto_control import ArgumentsParser, ConcertoControl


def main():
    parser = ArgumentsParser()
    concerto_control = ConcertoControl(parser.args)
    if not concerto_control.perform_command():
        sys.exit(1)


if __name__ == "__main__":
    main()
