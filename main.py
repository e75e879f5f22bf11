from rich.pretty import pprint

from gnuopt import *

__prog__ = "demo"

schema = Schema(arguments="FILE ...", header="Copy FILEs somewhere.", footer="Report bugs to the issue tracker.")
schema.add("v", "verbose", descr="print each file as it is copied")
schema.add("o", "output", ArgumentKind.REQUIRED, descr="destination directory", metavar="DIR", default=".")
schema.add("I", "include", ArgumentKind.MULTIPLE, descr="glob of files to include", metavar="GLOB")
schema.add("c", "color", ArgumentKind.OPTIONAL, descr="colorize output", metavar="WHEN")
schema.add(long="help", descr="show this help and exit")


if __name__ == '__main__':
    result = invoke(schema)
    if "help" in result:
        schema.print_usage()
    else:
        pprint(result)
