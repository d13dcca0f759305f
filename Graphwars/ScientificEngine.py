# ScientificEngine
"""""
Function table and constants for the graphing engine.

Every supported function takes exactly one argument. Domain checks live here so
MathEngine only has to walk the tree.
"""""
import math

from . import error as E


class SupportedFunction:
    """One entry of the function table: a name plus its numeric rule."""
    def __init__(self, name, rule):
        self.name = name
        self.rule = rule

    def apply(self, arg):
        return self.rule(arg)

    def __eq__(self, other):
        return isinstance(other, SupportedFunction) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"SupportedFunction({self.name!r})"


def isSin(arg):
    # math.sin refuses infinities, IEEE gives NaN
    if math.isinf(arg):
        return math.nan
    return math.sin(arg)


def isExp(arg):
    # Logistic curve 1 / (1 + e^arg), not the natural exponential.
    try:
        return 1.0 / (1.0 + math.pow(math.e, arg))
    except OverflowError:
        return 0.0


def isLn(arg):
    if arg > 0:
        return math.log(arg)
    raise E.OutOfDomain("ln", arg)


def isLog10(arg):
    if arg > 0:
        return math.log10(arg)
    raise E.OutOfDomain("log10", arg)


def isRoot(arg):
    if arg >= 0:
        return math.sqrt(arg)
    raise E.OutOfDomain("sqrt", arg)


SINE = SupportedFunction("sin", isSin)
EXP = SupportedFunction("exp", isExp)
LN = SupportedFunction("ln", isLn)
LOG10 = SupportedFunction("log10", isLog10)
SQRT = SupportedFunction("sqrt", isRoot)

# Order is the tokenizer priority: first prefix match wins
FUNCTIONS = [SINE, EXP, LN, LOG10, SQRT]

# Always in scope once a formula goes to the grapher
CONSTANTS = [("e", math.e), ("π", math.pi)]


def get_func(problem):
    """Return (function, name_length) if problem starts with a known function name, else None."""
    for func in FUNCTIONS:
        if problem.startswith(func.name):
            return func, len(func.name)
    return None


