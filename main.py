from rich.pretty import pprint

from cmdarg import *

parser = Parser(TerminalWrapHelpFormatter(
    description="A test example for cmdarg",
    epilogue="That's all folks!",
))

parser.add_argument(Argument(
    "count",
    "c",
    arity=Arity.REQUIRED,
    help="A simple counter with a rather long helpful message indeed",
    default="5",
    action=store_int,
))
parser.add_argument(Argument(
    "supercalifragilistichespiralidoso",
    "s",
    arity=Arity.OPTIONAL,
    help="A very long thing to say in one sentence",
))
parser.add_argument(Argument(
    "carramba",
    help="What a surprise!",
))
parser.add_argument(Argument("input", required=True, help="The input file"))
parser.add_argument(Argument("output", required=True, help="The output file"))


if __name__ == '__main__':
    pprint(dict(invoke(parser)))
