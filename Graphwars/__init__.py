from .MathEngine import parse, ParsedFunction, BoundFunction
from .GraphEngine import GraphTrace
from .error import MathError, ParseError, EvalError
