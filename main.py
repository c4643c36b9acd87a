from rich import print
from rich.pretty import pprint

from myargs import *


if __name__ == '__main__':
    with ArgumentParser(
            "my_program",
            description="This is a sample program.",
            epilog="Epilog message",
    ) as parser:
        parser.add_flag("v", "verbose", "Enable verbose mode")
        parser.add_flag("s", "store", "Save file Name")
        parser.add_keyword("c", "count", help="Number of times")

        try:
            result = parser.parse()
        except ParseError as error:
            # the partial result still tells whether help was asked for
            if error.result.get_flag("help"):
                parser.print_help()
                raise SystemExit(0) from None
            report(error, program=parser.config.program)
            raise SystemExit(2) from None

        for fault in result.faults:
            report(fault)

        if parser.get_flag("help"):
            parser.print_help()

        if (count := parser.get_keyword("count")) is not None:
            print(f"Count: {count}")
        if parser.get_flag("store"):
            print("Store: 1")
        if parser.get_flag("verbose"):
            print("Verbose: 1")
            pprint(result)
