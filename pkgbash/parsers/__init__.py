"""Shell-subset parser.

Parses the restricted shell dialect of package-build scripts into typed
fields without executing anything.
"""

from pkgbash.parsers.fields import BashParser, parse_bash, parse_file

__all__ = ["BashParser", "parse_bash", "parse_file"]
