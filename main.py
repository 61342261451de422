from rich.pretty import pprint

from argwalk import *

parser = ArgumentParser(shell=True)
parser.register("--verbose", arity=Arity.NONE, help="print what is being done")
parser.register("--count", "N", required=True, help="number of repetitions")
parser.register("--level", "LEVEL", arity=Arity.OPTIONAL, default="1", help="detail level")


@parser.option("--tag", "TAG", selection=Selection.TAKE_ALL, help="attach a tag (repeatable)")
def callback(tag):
    pass


if __name__ == '__main__':
    result = parser.parse_args()
    pprint(result)
    pprint(result["N"].value_as(int))
